from rusunawa.services.base.service_result import ErrorSeverity, ServiceError, ServiceResult

__all__ = ["ErrorSeverity", "ServiceError", "ServiceResult"]
