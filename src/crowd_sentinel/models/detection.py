"""
Detection Models
================

Schema for person detections produced by an external object detector.

Detections arrive as:
    {
        "label": "person",
        "score": 0.93,
        "box": {"xmin": 120.0, "ymin": 40.0, "xmax": 180.0, "ymax": 210.0}
    }

Coordinates are in IMAGE SPACE (pixels), origin at the top-left corner.
Detections are immutable once created.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BoundingBox(BaseModel):
    """
    Axis-aligned bounding box in pixel coordinates.

    Attributes:
        xmin: Left edge (pixels)
        ymin: Top edge (pixels)
        xmax: Right edge (pixels)
        ymax: Bottom edge (pixels)
    """

    model_config = ConfigDict(frozen=True)

    xmin: float = Field(..., description="Left edge (pixels)")
    ymin: float = Field(..., description="Top edge (pixels)")
    xmax: float = Field(..., description="Right edge (pixels)")
    ymax: float = Field(..., description="Bottom edge (pixels)")

    @model_validator(mode="after")
    def validate_ordering(self) -> "BoundingBox":
        """Reject inverted boxes."""
        if self.xmin > self.xmax:
            raise ValueError("xmin must be <= xmax")
        if self.ymin > self.ymax:
            raise ValueError("ymin must be <= ymax")
        return self

    @property
    def center(self) -> Tuple[float, float]:
        """Box centre (x, y) in pixels."""
        return (self.xmin + self.xmax) / 2, (self.ymin + self.ymax) / 2


class Detection(BaseModel):
    """
    One observed person.

    Attributes:
        label: Detector class label
        score: Detector confidence in [0, 1]
        box: Bounding box in pixel coordinates
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(default="person", description="Detector class label")

    score: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Detection confidence (0.0 to 1.0)",
    )

    box: BoundingBox = Field(..., description="Bounding box (pixels)")

    def normalized_center(self, image_width: float, image_height: float) -> Tuple[float, float]:
        """
        Box centre projected into [0, 1] x [0, 1] image space.

        Args:
            image_width: Source image width in pixels
            image_height: Source image height in pixels

        Returns:
            (x, y) with 0.0 used for any zero dimension
        """
        cx, cy = self.box.center
        x = cx / image_width if image_width > 0 else 0.0
        y = cy / image_height if image_height > 0 else 0.0
        return x, y
