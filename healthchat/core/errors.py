"""Domain errors. main.py maps each one to an HTTP status."""


class HealthChatError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordValidationError(HealthChatError):
    """A required tracker field is missing. Raised before any database call."""


class MessageValidationError(HealthChatError):
    pass


class ConversationNotFound(HealthChatError):
    status_code = 404

    def __init__(self, conversation_id: str):
        super().__init__(f"Conversation {conversation_id} not found")
        self.conversation_id = conversation_id


class RecordStorageError(HealthChatError):
    """The database rejected a tracker write. The message carries the driver error."""

    status_code = 500
