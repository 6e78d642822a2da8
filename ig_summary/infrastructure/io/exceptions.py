class IgSummaryInfrastructureError(Exception):
    pass


class DataSourceError(IgSummaryInfrastructureError):
    pass


class DataSourceNotFoundError(DataSourceError):
    pass


class DataParseError(DataSourceError):
    pass


class SettingsError(IgSummaryInfrastructureError):
    pass
