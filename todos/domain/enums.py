from enum import Enum

class ErrorKind(str, Enum):
    USER = "user"
    SYSTEM = "system"

    def __str__(self):
        return self.value
