class IgSummaryError(Exception):
    pass


class ElementResolutionError(IgSummaryError):
    pass


class DefinitionNotFoundError(ElementResolutionError):
    pass

