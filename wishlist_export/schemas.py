from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

SHEET_HEADERS: tuple[str, ...] = (
    "Property Name",
    "Rating",
    "Date",
    "Beds",
    "Total Price",
    "Link to listing",
    "Comment",
)


class ListingRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    propertyName: str = ""
    rating: str = ""
    date: str = ""
    beds: str = ""
    totalPrice: str = ""
    link: str = ""
    comment: str = ""

    def to_row(self) -> list[str]:
        return [
            self.propertyName or "",
            self.rating or "",
            self.date or "",
            self.beds or "",
            self.totalPrice or "",
            self.link or "",
            self.comment or "",
        ]


class ExtractionResult(BaseModel):
    """Outcome of one extraction run, shaped for the host channel."""

    success: bool
    data: Optional[list[ListingRecord]] = None
    wishlistName: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, records: list[ListingRecord], wishlist_name: str) -> "ExtractionResult":
        return cls(success=True, data=records, wishlistName=wishlist_name)

    @classmethod
    def failure(cls, message: str) -> "ExtractionResult":
        return cls(success=False, error=message)

    def to_message(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class HostMessage(BaseModel):
    action: str = Field(..., min_length=1)
    html: Optional[str] = None
    url: Optional[str] = None


class ExportRequest(BaseModel):
    wishlistName: Optional[str] = None
    wishlistData: list[ListingRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def normalise_name(self) -> "ExportRequest":
        if self.wishlistName is not None:
            self.wishlistName = self.wishlistName.strip() or None
        return self


class ExportResult(BaseModel):
    success: bool
    spreadsheetId: Optional[str] = None
    spreadsheetUrl: Optional[str] = None
    error: Optional[str] = None
    needsAuth: Optional[bool] = None


class AuthorizeResult(BaseModel):
    success: bool
    error: Optional[str] = None
