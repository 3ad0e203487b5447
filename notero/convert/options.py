from __future__ import annotations

from typing import Optional

from typing_extensions import Self

from notero.convert.annotation_notes import ImageUploader
from notero.config import env_config
from notero.notion.types.blocks import EmojiIcon
from notero.utils import lazyproperty


class ConversionOptions:
    """Specifies parameters of a single note conversion.

    Parameters
    ----------
    is_annotation
        The note is a Zotero annotation note. Paragraphs holding a highlight or an annotation image
        are rendered as callout/paragraph/divider sequences rather than converted as ordinary
        paragraphs.
    group_by_color
        Nest the annotation blocks under one toggleable heading per highlight color. Only applies
        to annotation notes. Defaults to the `ANNOTATION_GROUP_BY_COLOR` environment setting.
    image_uploader
        Publishes annotation images and returns their external URL. Image annotations are replaced
        by an error callout when none is provided.
    callout_icon
        Emoji shown on annotation callouts, the empty string for no icon. Defaults to the
        `ANNOTATION_CALLOUT_ICON` environment setting.
    max_concurrent_uploads
        Maximum number of annotation images being uploaded at the same time. Defaults to the
        `IMAGE_UPLOAD_CONCURRENCY` environment setting.
    """

    def __init__(
        self,
        *,
        is_annotation: bool = False,
        group_by_color: Optional[bool] = None,
        image_uploader: Optional[ImageUploader] = None,
        callout_icon: Optional[str] = None,
        max_concurrent_uploads: Optional[int] = None,
    ):
        self._is_annotation = is_annotation
        self._group_by_color_arg = group_by_color
        self._image_uploader = image_uploader
        self._callout_icon_arg = callout_icon
        self._max_concurrent_uploads_arg = max_concurrent_uploads

    @classmethod
    def new(
        cls,
        *,
        is_annotation: bool = False,
        group_by_color: Optional[bool] = None,
        image_uploader: Optional[ImageUploader] = None,
        callout_icon: Optional[str] = None,
        max_concurrent_uploads: Optional[int] = None,
    ) -> Self:
        """Construct validated instance.

        Raises `ValueError` on invalid arguments like a concurrency limit below one.
        """
        self = cls(
            is_annotation=is_annotation,
            group_by_color=group_by_color,
            image_uploader=image_uploader,
            callout_icon=callout_icon,
            max_concurrent_uploads=max_concurrent_uploads,
        )
        self._validate()
        return self

    @property
    def is_annotation(self) -> bool:
        return self._is_annotation

    @lazyproperty
    def group_by_color(self) -> bool:
        """Group annotation blocks into color sections; never for ordinary notes."""
        if not self._is_annotation:
            return False
        arg_value = self._group_by_color_arg
        return env_config.ANNOTATION_GROUP_BY_COLOR if arg_value is None else arg_value

    @property
    def image_uploader(self) -> Optional[ImageUploader]:
        return self._image_uploader

    @lazyproperty
    def callout_icon(self) -> Optional[EmojiIcon]:
        arg_value = self._callout_icon_arg
        emoji = env_config.ANNOTATION_CALLOUT_ICON if arg_value is None else arg_value
        return EmojiIcon(emoji) if emoji else None

    @lazyproperty
    def max_concurrent_uploads(self) -> int:
        arg_value = self._max_concurrent_uploads_arg
        return env_config.IMAGE_UPLOAD_CONCURRENCY if arg_value is None else arg_value

    def _validate(self) -> None:
        if self.max_concurrent_uploads < 1:
            raise ValueError(
                f"'max_concurrent_uploads' argument must be > 0,"
                f" got {self.max_concurrent_uploads}"
            )
