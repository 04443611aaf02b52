from .operations import router as operations_router
from .documents import router as documents_router, clear_output_store

__all__ = ['operations_router', 'documents_router', 'clear_output_store']
