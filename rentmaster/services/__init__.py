"""Services for RentMaster."""

from rentmaster.services.audit import AuditService, snapshot
from rentmaster.services.storage import StorageService, get_storage_service
from rentmaster.services.leasing import LeaseService
from rentmaster.services.payments import PaymentService
from rentmaster.services.documents import DocumentService
from rentmaster.services.reporting import ReportingService
from rentmaster.services.pdf_generator import PDFGenerator, get_pdf_generator

__all__ = [
    "AuditService",
    "snapshot",
    "StorageService",
    "get_storage_service",
    "LeaseService",
    "PaymentService",
    "DocumentService",
    "ReportingService",
    "PDFGenerator",
    "get_pdf_generator",
]
