"""Typed exception hierarchy. Every error actionflow can raise."""


class ActionflowError(Exception):
    """Base exception for all actionflow errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


# ── Workflow structure ──────────────────────────────────────────────────────


class WorkflowValidationError(ActionflowError):
    """Workflow definition is structurally invalid (missing ids, duplicate ids, etc.).

    Always aborts the run before any action executes.
    """
    def __init__(self, message: str, violations: list = None, **kwargs):
        super().__init__(message, **kwargs)
        self.violations = violations or []


# ── Registry ────────────────────────────────────────────────────────────────


class ToolNotFound(ActionflowError):
    """Referenced function is absent from the registry (or deactivated)."""
    def __init__(self, message: str, tool_name: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.tool_name = tool_name


# ── Reference resolution ────────────────────────────────────────────────────


class ResolutionError(ActionflowError):
    """A parameter reference could not be resolved against the result store."""
    def __init__(self, message: str, reference: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.reference = reference


class ReferenceNotFound(ResolutionError):
    """Reference names an action id with no recorded result."""
    def __init__(self, message: str, action_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.action_id = action_id


class FieldNotFound(ResolutionError):
    """A path segment is missing from a prior action's result."""
    def __init__(self, message: str, path: str = "", field: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.field = field


class UnresolvedUserInput(ResolutionError):
    """A ``userInput.*`` placeholder reached the engine without being filled in."""
    pass


class ParameterError(ResolutionError):
    """A ResolutionError tagged with the action parameter that triggered it."""
    def __init__(self, message: str, parameter: str = "", cause: ResolutionError = None, **kwargs):
        super().__init__(message, **kwargs)
        self.parameter = parameter
        self.cause = cause


# ── Execution ───────────────────────────────────────────────────────────────


class MapExpansionError(ActionflowError):
    """A mapped action could not be fanned out over its array parameter."""
    def __init__(self, message: str, action_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.action_id = action_id


class InvocationError(ActionflowError):
    """The invoked function raised, or was called without its required parameters."""
    def __init__(self, message: str, tool_name: str = "", params: dict = None, **kwargs):
        super().__init__(message, **kwargs)
        self.tool_name = tool_name
        self.params = params or {}
