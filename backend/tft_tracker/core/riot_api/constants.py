"""Riot API constants and enum definitions."""

from enum import Enum


class Region(str, Enum):
    """Riot API regions for regional routing (account and match endpoints)."""

    AMERICAS = "americas"
    ASIA = "asia"
    EUROPE = "europe"
    SEA = "sea"


class Platform(str, Enum):
    """Riot API platforms for platform routing (league endpoints)."""

    BR1 = "br1"
    EUN1 = "eun1"
    EUW1 = "euw1"
    JP1 = "jp1"
    KR = "kr"
    LA1 = "la1"
    LA2 = "la2"
    NA1 = "na1"
    OC1 = "oc1"
    PH2 = "ph2"
    RU = "ru"
    SG2 = "sg2"
    TH2 = "th2"
    TR1 = "tr1"
    TW2 = "tw2"
    VN2 = "vn2"


PLATFORM_REGIONS = {
    Platform.BR1: Region.AMERICAS,
    Platform.LA1: Region.AMERICAS,
    Platform.LA2: Region.AMERICAS,
    Platform.NA1: Region.AMERICAS,
    Platform.EUN1: Region.EUROPE,
    Platform.EUW1: Region.EUROPE,
    Platform.RU: Region.EUROPE,
    Platform.TR1: Region.EUROPE,
    Platform.JP1: Region.ASIA,
    Platform.KR: Region.ASIA,
    Platform.OC1: Region.SEA,
    Platform.PH2: Region.SEA,
    Platform.SG2: Region.SEA,
    Platform.TH2: Region.SEA,
    Platform.TW2: Region.SEA,
    Platform.VN2: Region.SEA,
}


def region_for_platform(platform: str) -> Region:
    """Regional routing value serving a platform shard."""
    return PLATFORM_REGIONS[Platform(platform.lower())]


class QueueType(int, Enum):
    """TFT queue ids found in ``info.queueId`` of a match."""

    # Ranked queues
    RANKED_TFT = 1100
    RANKED_DOUBLE_UP = 1160

    # Normal queues
    NORMAL_TFT = 1090
    HYPER_ROLL = 1130
    NORMAL_DOUBLE_UP = 1150

    # Other queues
    TUTORIAL = 1110
    TOCKERS_TRIALS = 1210
