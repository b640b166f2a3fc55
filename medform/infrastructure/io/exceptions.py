class MedformInfrastructureError(Exception):
    pass


class DataSourceError(MedformInfrastructureError):
    pass


class DataSourceNotFoundError(DataSourceError):
    pass


class DataParseError(DataSourceError):
    pass


class DataValidationError(DataSourceError):
    pass


class InterchangeLoadError(DataSourceError):
    """An interchange file could not be read; nothing was imported."""
