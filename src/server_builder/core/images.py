"""
Image catalogue.

Maps the image keyword a drive asks for to the library drive the control plane
copies from. Keywords are resolved through an explicit mapping so an unknown
keyword fails while the configuration is loaded, not halfway through a build.

The default entries can be replaced or extended from the build manifest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from server_builder.core.errors import ConfigurationError


@dataclass(frozen=True)
class DiskImage:
    """
    keyword
    Name used in configuration, for example "ubuntu".

    source_id
    Remote id of the library drive the image is copied from.
    """

    keyword: str
    source_id: str


DEFAULT_IMAGES: dict[str, str] = {
    "ubuntu": "a2d1e8c0-9b4b-4f0e-8e3a-6f1b0c5d7e21",
    "debian": "3c9f0a7e-52d4-4b8a-9d61-0e7b2f4c8a13",
    "centos": "8e47b1d2-0c6a-4f35-b9e8-71d2a6c3f094",
}


@dataclass
class ImageCatalogue:
    """Keyword to DiskImage registry."""

    _images: dict[str, DiskImage] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "ImageCatalogue":
        catalogue = cls()
        for keyword, source_id in mapping.items():
            catalogue.add(DiskImage(keyword=str(keyword), source_id=str(source_id)))
        return catalogue

    @classmethod
    def default(cls) -> "ImageCatalogue":
        return cls.from_mapping(DEFAULT_IMAGES)

    def add(self, image: DiskImage) -> None:
        """Add or replace an image."""
        if not image.keyword or not image.source_id:
            raise ConfigurationError("image keyword and source id are required")
        self._images[image.keyword] = image

    def resolve(self, keyword: str) -> DiskImage:
        image = self._images.get(keyword)
        if image is None:
            known = ", ".join(self.keywords()) or "none"
            raise ConfigurationError(f"unknown image {keyword!r}, known images: {known}")
        return image

    def validate(self, keywords: Iterable[str]) -> None:
        """Resolve every keyword, raising on the first unknown one."""
        for keyword in keywords:
            self.resolve(keyword)

    def keywords(self) -> list[str]:
        return sorted(self._images.keys())

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._images
