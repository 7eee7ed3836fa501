"""Exception classes for GifStag."""

EMPTY_SEQUENCE_MESSAGE = "Add images first"
"Shown when a preview or export is requested without any slides"


class GifStagError(Exception):
    """Base exception for GifStag errors.

    :param message: Technical description, used for logging
    :param user_message: Short message which can be shown to the user
    """

    default_user_message = "Something went wrong"

    def __init__(self, message: str = "", user_message: str | None = None):
        super().__init__(message or self.default_user_message)
        self.user_message = user_message or self.default_user_message


class DecodeFailure(GifStagError):
    """Raised when uploaded bytes are not a readable image."""

    default_user_message = "The file is not a supported image"


class CompressionFailure(GifStagError):
    """Raised when downscaling or recompressing an upload fails.

    Never escapes the normalizer, which falls back to the original bytes.
    """

    default_user_message = "The image could not be compressed"


class BuildCancelled(GifStagError):
    """Raised inside a build which was superseded or abandoned."""

    default_user_message = "The build was cancelled"


class EncodeFailure(GifStagError):
    """Raised when the GIF encoder could not produce a file."""

    default_user_message = "Creating the GIF failed, please try again"
