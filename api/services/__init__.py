from .processor import DocumentProcessor, get_processor, initialize_processor, shutdown_processor

__all__ = ['DocumentProcessor', 'get_processor', 'initialize_processor', 'shutdown_processor']
