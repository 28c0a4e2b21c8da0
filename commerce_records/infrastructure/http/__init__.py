from commerce_records.infrastructure.http.executor import ApiResponse, RequestExecutor, encode_params

__all__ = ["ApiResponse", "RequestExecutor", "encode_params"]
