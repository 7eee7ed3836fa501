"""
GifStag - Turns a sequence of still images into an animated GIF with
transitions and captions
"""

from .image import Image, ImageSourceTypes, SUPPORTED_IMAGE_FILETYPES
from .interpolation import InterpolationMethod
from .exceptions import (
    GifStagError,
    DecodeFailure,
    CompressionFailure,
    BuildCancelled,
    EncodeFailure,
    EMPTY_SEQUENCE_MESSAGE,
)
from .dimensions import CanvasSize, DimensionReconciler
from .cropper import compute_crop_box, crop_center
from .text_style import TextStyle, HorizontalAlign, VerticalAnchor
from .font_registry import FontRegistry
from .canvas import Canvas
from .text_layout import TextLayoutEngine
from .slide import TransitionKind, SlideSpec, SlideSequence
from .compositor import TransitionCompositor
from .timeline import Frame, FrameKind, FrameRequest, TimelineBuilder
from .encoder import EncodedGif, GifEncoder, PillowGifEncoder, encode_async
from .normalizer import ImageNormalizer, UploadOutcome
from .project import GifProject, BuildMode, BuildStatus, BuildResult

__all__ = [
    # Images
    "Image",
    "ImageSourceTypes",
    "SUPPORTED_IMAGE_FILETYPES",
    "InterpolationMethod",
    # Errors
    "GifStagError",
    "DecodeFailure",
    "CompressionFailure",
    "BuildCancelled",
    "EncodeFailure",
    "EMPTY_SEQUENCE_MESSAGE",
    # Geometry
    "CanvasSize",
    "DimensionReconciler",
    "compute_crop_box",
    "crop_center",
    # Captions
    "TextStyle",
    "HorizontalAlign",
    "VerticalAnchor",
    "FontRegistry",
    "TextLayoutEngine",
    # Frame synthesis
    "Canvas",
    "TransitionKind",
    "SlideSpec",
    "SlideSequence",
    "TransitionCompositor",
    "Frame",
    "FrameKind",
    "FrameRequest",
    "TimelineBuilder",
    # Encoding
    "EncodedGif",
    "GifEncoder",
    "PillowGifEncoder",
    "encode_async",
    # Projects
    "ImageNormalizer",
    "UploadOutcome",
    "GifProject",
    "BuildMode",
    "BuildStatus",
    "BuildResult",
]

__version__ = "0.1.0"
