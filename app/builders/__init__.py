# Builders package - Output format builders
from .page_xml_builder import PageXmlBuilder

__all__ = ['PageXmlBuilder']
