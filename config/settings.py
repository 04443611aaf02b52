"""
Centralized configuration settings for the Vision-to-PAGE converter.
"""
# Cloud Vision settings
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
MAX_IMAGE_BYTES = 10485760  # Upload limit of the annotate endpoint (10 MiB)

# Size basis for normalized vertices when the image cannot be measured
DEFAULT_SIZE_BASIS = (100, 100)

# Recognition modes
MODE_OCR = "ocr"
MODE_OBJECT = "object"

# PAGE XML output settings
PAGE_XML_NAMESPACE = "http://schema.primaresearch.org/PAGE/gts/pagecontent/2019-07-15"
PAGE_XML_SCHEMA_LOCATION = (
    PAGE_XML_NAMESPACE + " "
    "http://schema.primaresearch.org/PAGE/gts/pagecontent/2019-07-15/pagecontent.xsd"
)
PAGE_XML_CREATOR = "vision2page (Google Cloud Vision)"
