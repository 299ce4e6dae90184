class UnknownUser(LookupError):
    pass


class UnknownAction(LookupError):
    pass


class ActionStillTriggered(ValueError):
    """The condition behind an action still holds, so it cannot be completed yet."""


class ActionAlreadyActive(ValueError):
    pass


class ActionNotInProgress(ValueError):
    pass


class ActionNotTriggered(ValueError):
    """The action's condition does not currently hold, so there is nothing to fix."""
