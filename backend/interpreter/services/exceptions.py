"""
Interpreter Exceptions

Custom exceptions for segmentation, translation and speech output errors.
None of these are fatal; callers degrade and continue with the next sentence.
"""


class InterpreterError(Exception):
    """Base exception for interpreter errors"""
    pass


class TranslationFailure(InterpreterError):
    """Raised when a translation call errors out or times out"""
    pass


class TranslationUnavailable(InterpreterError):
    """Raised when a language pair cannot be prepared for translation"""
    pass


class SpeechDeviceUnavailable(InterpreterError):
    """Raised when the speech output device is not initialized"""
    pass


class InvalidSnapshot(InterpreterError):
    """Raised when a transcript snapshot arrives while no session is active"""
    pass


class SessionStateError(InterpreterError):
    """Raised when a session operation is not valid in the current state"""
    pass
