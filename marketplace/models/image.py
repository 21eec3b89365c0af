"""
PropertyImage model for listing photos.
Images live in an external store; only the URL, caption and storage reference are kept here.
"""

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
import uuid
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from marketplace.models.property import Property


class PropertyImage(Base):
    """Ordered image entry attached to a property."""

    __tablename__ = "property_images"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Public URL of the image"
    )

    caption: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )

    public_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Reference of the image in the external storage"
    )

    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="images"
    )

    def __repr__(self) -> str:
        return f"<PropertyImage(id={self.id}, property_id={self.property_id}, order={self.display_order})>"

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "caption": self.caption,
            "public_id": self.public_id,
        }
