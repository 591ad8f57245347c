"""
Lab Errors
The three ways an invocation can fail. Views turn these into a fixed message on the card.
"""


class LabError(Exception):
    """
    Base for every failure an adapter is allowed to raise.
    """
    user_message = "API Request Failed"


class RequestFailed(LabError):
    """
    Transport or provider error, timeout, or missing credential.
    """
    user_message = "API Request Failed"


class MalformedResponse(LabError):
    """
    Empty body, or a body that does not parse into the requested schema.
    """
    user_message = "Malformed response from model"


class EmptyInput(LabError):
    """
    Nothing to send. Raised before any network call is made.
    """
    user_message = "Input required"
