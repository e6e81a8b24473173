"""Pydantic models for the SauceNAO JSON reply (output_type=2)."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ResponseHeader(BaseModel):
    """Top-level header: status, account limits and query echo"""
    status: int
    message: Optional[str] = None
    # Limits come back as strings ("6", "100"); pydantic coerces them
    short_limit: int = 12
    long_limit: int = 200
    short_remaining: int = 12
    long_remaining: int = 200
    user_id: Optional[Union[int, str]] = None
    account_type: Optional[Union[int, str]] = None
    results_requested: Optional[int] = None
    search_depth: Optional[Union[int, str]] = None
    minimum_similarity: Optional[float] = None
    query_image: Optional[str] = None
    query_image_display: Optional[str] = None
    results_returned: Optional[int] = None


class ResultHeader(BaseModel):
    similarity: float
    thumbnail: str = ""
    index_id: int
    index_name: str
    dupes: Optional[int] = None


class ResultData(BaseModel):
    """
    Per-result data. Only ext_urls and title are shared by every index;
    the rest (pixiv_id, member_name, part, ...) varies per database and is
    kept as extra fields.
    """
    model_config = ConfigDict(extra="allow")

    ext_urls: list[str] = Field(default_factory=list)
    title: Optional[str] = None

    @property
    def additional_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ResultItem(BaseModel):
    header: ResultHeader
    data: ResultData = Field(default_factory=ResultData)


class SauceResult(BaseModel):
    """Whole reply. `results` is absent on error replies"""
    header: ResponseHeader
    results: Optional[list[ResultItem]] = None


def parse_index(index_name: str) -> int:
    """
    Extract the database index from a result's index_name.

    "Index #5: Pixiv Images - 12345_p0.jpg" -> 5
    """
    head = index_name.split(":", 1)[0]
    _, _, number = head.partition("#")
    return int(number.strip())
