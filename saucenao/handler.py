"""SauceNAO API handler

Builds search URLs, submits images by link or file upload and turns the
JSON reply into Sauce objects. The handler also remembers the rate-limit
counters SauceNAO reports with every successful search.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlencode, urlparse

import aiohttp
from pydantic import ValidationError

from . import constants
from .config import Settings
from .errors import ErrType, SauceError
from .models import ResultItem, SauceResult, parse_index
from .sauce import Sauce, pick_title, to_json

logger = logging.getLogger(__name__)

ImageInput = Union[str, Path, bytes]

# Bitmask positions skip index 17, so everything from 18 up shifts down one
MASK_OFFSET_FROM = 18


def is_link(image: ImageInput) -> bool:
    return isinstance(image, str) and image.startswith(("https://", "http://"))


class HandlerBuilder:
    """
    Fluent builder for Handler.

        handler = HandlerBuilder().api_key("your_api_key").num_results(10).db(999).build()

    Anything left unset falls back to SauceNAO's defaults.
    """

    def __init__(self):
        self._api_key: Optional[str] = None
        self._testmode: Optional[bool] = None
        self._db_mask: Optional[list[int]] = None
        self._db_mask_i: Optional[list[int]] = None
        self._db: Optional[int] = None
        self._num_results: Optional[int] = None
        self._min_similarity: Optional[float] = None
        self._empty_filter_enabled: Optional[bool] = None
        self._timeout: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "HandlerBuilder":
        builder = cls().api_key(settings.api_key).timeout(settings.timeout)
        if settings.testmode is not None:
            builder.testmode(settings.testmode)
        if settings.db is not None:
            builder.db(settings.db)
        if settings.num_results is not None:
            builder.num_results(settings.num_results)
        if settings.min_similarity is not None:
            builder.min_similarity(settings.min_similarity)
        if settings.empty_filter_enabled is not None:
            builder.empty_filter_enabled(settings.empty_filter_enabled)
        return builder

    def api_key(self, api_key: str) -> "HandlerBuilder":
        self._api_key = api_key
        return self

    def testmode(self, testmode: bool) -> "HandlerBuilder":
        """Limit every index to at most one result."""
        self._testmode = testmode
        return self

    def db_mask(self, db_mask: list[int]) -> "HandlerBuilder":
        """Database indices to include."""
        self._db_mask = list(db_mask)
        return self

    def db_mask_i(self, db_mask_i: list[int]) -> "HandlerBuilder":
        """Database indices to exclude."""
        self._db_mask_i = list(db_mask_i)
        return self

    def db(self, db: int) -> "HandlerBuilder":
        """Single database index to search, 999 for all."""
        self._db = db
        return self

    def num_results(self, num_results: int) -> "HandlerBuilder":
        self._num_results = num_results
        return self

    def min_similarity(self, min_similarity: float) -> "HandlerBuilder":
        self._min_similarity = float(min_similarity)
        return self

    def empty_filter_enabled(self, enabled: bool) -> "HandlerBuilder":
        """Drop results without any external URL."""
        self._empty_filter_enabled = enabled
        return self

    def timeout(self, timeout: float) -> "HandlerBuilder":
        self._timeout = timeout
        return self

    def build(self) -> "Handler":
        testmode = None
        if self._testmode is not None:
            testmode = 1 if self._testmode else 0

        handler = Handler(
            api_key=self._api_key or "",
            testmode=testmode,
            db_mask=self._db_mask,
            db_mask_i=self._db_mask_i,
            db=self._db,
            num_results=self._num_results,
            timeout=self._timeout if self._timeout is not None else 30.0,
        )
        if self._min_similarity is not None:
            handler.set_min_similarity(self._min_similarity)
        if self._empty_filter_enabled is not None:
            handler.set_empty_filter(self._empty_filter_enabled)
        return handler


class Handler:
    """
    Makes SauceNAO API calls.

    Short and long limits start at SauceNAO's anonymous defaults (12 per
    30 seconds, 200 per day) and are replaced with the server's numbers
    after each successful search.
    """

    H_MAGAZINES = constants.H_MAGAZINES.index
    H_GAME_CG = constants.H_GAME_CG.index
    DOUJINSHI_DB = constants.DOUJINSHI_DB.index
    PIXIV = constants.PIXIV.index
    NICO_NICO_SEIGA = constants.NICO_NICO_SEIGA.index
    DANBOORU = constants.DANBOORU.index
    DRAWR = constants.DRAWR.index
    NIJIE = constants.NIJIE.index
    YANDE_RE = constants.YANDE_RE.index
    SHUTTERSTOCK = constants.SHUTTERSTOCK.index
    FAKKU = constants.FAKKU.index
    H_MISC = constants.H_MISC.index
    TWO_D_MARKET = constants.TWO_D_MARKET.index
    MEDIBANG = constants.MEDIBANG.index
    ANIME = constants.ANIME.index
    H_ANIME = constants.H_ANIME.index
    MOVIES = constants.MOVIES.index
    SHOWS = constants.SHOWS.index
    GELBOORU = constants.GELBOORU.index
    KONACHAN = constants.KONACHAN.index
    SANKAKU_CHANNEL = constants.SANKAKU_CHANNEL.index
    ANIME_PICTURES_NET = constants.ANIME_PICTURES_NET.index
    E621_NET = constants.E621_NET.index
    IDOL_COMPLEX = constants.IDOL_COMPLEX.index
    BCY_NET_ILLUST = constants.BCY_NET_ILLUST.index
    BCY_NET_COSPLAY = constants.BCY_NET_COSPLAY.index
    PORTALGRAPHICS_NET = constants.PORTALGRAPHICS_NET.index
    DEVIANTART = constants.DEVIANTART.index
    PAWOO_NET = constants.PAWOO_NET.index
    MADOKAMI = constants.MADOKAMI.index
    MANGADEX = constants.MANGADEX.index

    def __init__(
        self,
        api_key: str = "",
        testmode: Optional[int] = None,
        db_mask: Optional[list[int]] = None,
        db_mask_i: Optional[list[int]] = None,
        db: Optional[int] = None,
        num_results: Optional[int] = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.output_type = 2  # JSON
        self.testmode = testmode
        self.db_mask = list(db_mask) if db_mask is not None else None
        self.db_mask_i = list(db_mask_i) if db_mask_i is not None else None
        self.db = db
        self.num_results = num_results
        self.timeout = aiohttp.ClientTimeout(total=timeout)

        self.short_limit = 12
        self.long_limit = 200
        self.short_left = 12
        self.long_left = 200
        self.min_similarity = 0.0
        self.empty_filter_enabled = False

    def set_min_similarity(self, min_similarity: float):
        self.min_similarity = float(min_similarity)

    def set_empty_filter(self, enabled: bool):
        self.empty_filter_enabled = enabled

    def get_short_limit(self) -> int:
        return self.short_limit

    def get_long_limit(self) -> int:
        return self.long_limit

    def get_current_short_limit(self) -> int:
        return self.short_left

    def get_current_long_limit(self) -> int:
        return self.long_left

    def limits(self) -> dict:
        return {
            "short_limit": self.short_limit,
            "long_limit": self.long_limit,
            "short_remaining": self.short_left,
            "long_remaining": self.long_left,
        }

    def generate_bitmask(self, mask: list[int]) -> int:
        """Encode database indices as SauceNAO's dbmask integer."""
        result = 0
        for index in set(mask):
            offset = 1 if index >= MASK_OFFSET_FROM else 0
            result |= 1 << (index - offset)
        return result

    def generate_url(self, image_path: ImageInput, num_results: Optional[int] = None) -> str:
        """
        Build the search URL.

        Parameter order is fixed: api_key, output_type, db, dbmask,
        dbmaski, testmode, numres, url. Without db or a non-empty db_mask
        every index is searched (db=999).
        """
        params = [
            ("api_key", self.api_key),
            ("output_type", str(self.output_type)),
        ]

        if self.db is not None:
            params.append(("db", str(self.db)))

        if self.db_mask:
            params.append(("dbmask", str(self.generate_bitmask(self.db_mask))))
        elif self.db is None:
            params.append(("db", str(constants.ALL_DATABASES)))

        if self.db_mask_i:
            params.append(("dbmaski", str(self.generate_bitmask(self.db_mask_i))))

        params.append(("testmode", str(self.testmode if self.testmode is not None else 0)))

        if num_results is not None:
            numres = num_results
        elif self.num_results is not None:
            numres = self.num_results
        else:
            numres = constants.MAX_RESULTS
        params.append(("numres", str(numres)))

        if is_link(image_path):
            if not urlparse(image_path).netloc:
                raise SauceError(ErrType.URL, f"Invalid image URL: {image_path}")
            params.append(("url", image_path))

        return f"{constants.API_URL}?{urlencode(params)}"

    def _build_form(self, image: ImageInput) -> Optional[aiohttp.FormData]:
        """Multipart body for uploads; links go in the query string instead."""
        if is_link(image):
            return None

        if isinstance(image, bytes):
            content, filename = image, "image"
        else:
            path = Path(image)
            try:
                content = path.read_bytes()
            except OSError as e:
                raise SauceError(ErrType.IO, f"Could not read {path}: {e}") from e
            filename = path.name

        form = aiohttp.FormData()
        form.add_field("file", content, filename=filename)
        return form

    async def _post(self, url: str, form: Optional[aiohttp.FormData]) -> object:
        """POST the search and return the decoded JSON body."""
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(url, data=form) as response:
                    if response.status != 200:
                        # Error replies still carry a JSON header with the reason
                        logger.warning(f"SauceNAO responded with HTTP {response.status}")
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SauceError(ErrType.REQUEST, f"Request to SauceNAO failed: {e}") from e
        except ValueError as e:
            raise SauceError(ErrType.JSON, f"SauceNAO did not return JSON: {e}") from e

    def _to_sauce(self, item: ResultItem) -> Sauce:
        try:
            index = parse_index(item.header.index_name)
        except ValueError as e:
            raise SauceError(ErrType.JSON, f"Unexpected index_name {item.header.index_name!r}") from e

        fields = item.data.additional_fields
        source = constants.get_source(index)
        return Sauce(
            ext_urls=list(item.data.ext_urls),
            title=pick_title(item.data.title, fields),
            site=source.name if source else item.header.index_name,
            index=index,
            index_id=item.header.index_id,
            similarity=item.header.similarity,
            thumbnail=item.header.thumbnail,
            additional_fields=fields if source else None,
        )

    async def get_sauce(
        self,
        image_path: ImageInput,
        num_results: Optional[int] = None,
        min_similarity: Optional[float] = None,
    ) -> list[Sauce]:
        """
        Search SauceNAO for the sources of an image.

        Args:
            image_path: http(s) link, local file path or raw image bytes
            num_results: Results to request for this search (at most 999),
                defaults to the handler's setting
            min_similarity: Minimum similarity in percent for this search,
                defaults to the handler's setting

        Returns:
            List of Sauce objects that passed the similarity and empty filters

        Raises:
            SauceError: on invalid arguments, unreadable files, transport
                failures, malformed replies or a negative server status
        """
        if num_results is not None and num_results > constants.MAX_RESULTS:
            raise SauceError.invalid_parameter("num_results must be less than 999.")
        if min_similarity is not None and not 0.0 <= min_similarity <= 100.0:
            raise SauceError.invalid_parameter("min_similarity must be between 0.0 and 100.0.")

        url = self.generate_url(image_path, num_results)
        form = self._build_form(image_path)
        logger.info(f"Searching SauceNAO ({'link' if form is None else 'upload'})")

        body = await self._post(url, form)
        try:
            reply = SauceResult.model_validate(body)
        except ValidationError as e:
            raise SauceError(ErrType.JSON, f"Unexpected SauceNAO reply: {e}") from e

        header = reply.header
        if header.status < 0:
            logger.error(f"SauceNAO error {header.status}: {header.message}")
            raise SauceError.invalid_code(header.status, header.message)

        self.short_left = header.short_remaining
        self.long_left = header.long_remaining
        self.short_limit = header.short_limit
        self.long_limit = header.long_limit

        threshold = min_similarity if min_similarity is not None else self.min_similarity
        results = []
        for item in reply.results or []:
            if item.header.similarity < threshold:
                continue
            if self.empty_filter_enabled and not item.data.ext_urls:
                continue
            results.append(self._to_sauce(item))

        logger.info(
            f"SauceNAO returned {len(reply.results or [])} results, kept {len(results)} "
            f"(short {self.short_left}/{self.short_limit}, long {self.long_left}/{self.long_limit})"
        )
        return results

    async def get_sauce_as_json(
        self,
        image_path: ImageInput,
        num_results: Optional[int] = None,
        min_similarity: Optional[float] = None,
    ) -> str:
        results = await self.get_sauce(image_path, num_results, min_similarity)
        return to_json(results)

    async def get_sauce_as_pretty_json(
        self,
        image_path: ImageInput,
        num_results: Optional[int] = None,
        min_similarity: Optional[float] = None,
    ) -> str:
        results = await self.get_sauce(image_path, num_results, min_similarity)
        return to_json(results, pretty=True)
