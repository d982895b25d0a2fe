from .custom import from_code, from_logs, CustomError
