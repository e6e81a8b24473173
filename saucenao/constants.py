"""SauceNAO endpoint and database index table."""

from dataclasses import dataclass
from typing import Optional

API_URL = "https://saucenao.com/search.php"

# db=999 asks the server to search every index
ALL_DATABASES = 999

# Server-side cap on numres
MAX_RESULTS = 999


@dataclass(frozen=True)
class Source:
    """A SauceNAO database index and its display name"""
    index: int
    name: str


H_MAGAZINES = Source(0, "H-Magazines")
H_GAME_CG = Source(2, "H-Game CG")
DOUJINSHI_DB = Source(3, "DoujinshiDB")
PIXIV = Source(5, "Pixiv")
NICO_NICO_SEIGA = Source(8, "Nico Nico Seiga")
DANBOORU = Source(9, "Danbooru")
DRAWR = Source(10, "drawr Images")
NIJIE = Source(11, "Nijie Images")
YANDE_RE = Source(12, "Yande.re")
SHUTTERSTOCK = Source(15, "Shutterstock")
FAKKU = Source(16, "FAKKU")
H_MISC = Source(18, "H-Misc")
TWO_D_MARKET = Source(19, "2D-Market")
MEDIBANG = Source(20, "MediBang")
ANIME = Source(21, "Anime")
H_ANIME = Source(22, "H-Anime")
MOVIES = Source(23, "Movies")
SHOWS = Source(24, "Shows")
GELBOORU = Source(25, "Gelbooru")
KONACHAN = Source(26, "Konachan")
SANKAKU_CHANNEL = Source(27, "Sankaku Channel")
ANIME_PICTURES_NET = Source(28, "Anime-Pictures.net")
E621_NET = Source(29, "e621.net")
IDOL_COMPLEX = Source(30, "Idol Complex")
BCY_NET_ILLUST = Source(31, "bcy.net Illust")
BCY_NET_COSPLAY = Source(32, "bcy.net Cosplay")
PORTALGRAPHICS_NET = Source(33, "PortalGraphics.net")
DEVIANTART = Source(34, "deviantArt")
PAWOO_NET = Source(35, "Pawoo.net")
MADOKAMI = Source(36, "Madokami")
MANGADEX = Source(37, "MangaDex")

LIST_OF_SOURCES = [
    H_MAGAZINES,
    H_GAME_CG,
    DOUJINSHI_DB,
    PIXIV,
    NICO_NICO_SEIGA,
    DANBOORU,
    DRAWR,
    NIJIE,
    YANDE_RE,
    SHUTTERSTOCK,
    FAKKU,
    H_MISC,
    TWO_D_MARKET,
    MEDIBANG,
    ANIME,
    H_ANIME,
    MOVIES,
    SHOWS,
    GELBOORU,
    KONACHAN,
    SANKAKU_CHANNEL,
    ANIME_PICTURES_NET,
    E621_NET,
    IDOL_COMPLEX,
    BCY_NET_ILLUST,
    BCY_NET_COSPLAY,
    PORTALGRAPHICS_NET,
    DEVIANTART,
    PAWOO_NET,
    MADOKAMI,
    MANGADEX,
]

SOURCE_MAP = {src.index: src for src in LIST_OF_SOURCES}


def get_source(index: int) -> Optional[Source]:
    """
    Get the known source for a database index.
    Returns None if the index is not in the table.
    """
    return SOURCE_MAP.get(index)
