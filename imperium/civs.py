"""Civilization definitions and city naming for Imperium."""
from __future__ import annotations
import random

from .types import Player

CIVS = {
    "romans": {
        "name": "Roman Empire", "adjective": "Roman", "color": "#FFDE21", "leader": "Caesar",
        "cities": ["Rome", "Caesarea", "Carthage", "Nicopolis", "Byzantium", "Brundisium",
                   "Syracuse", "Antioch", "Palmyra", "Cyrene", "Gordion", "Tyrus",
                   "Jerusalem", "Seleucia", "Ravenna", "Artaxata"],
    },
    "american": {
        "name": "Americans", "adjective": "American", "color": "#FF00FF", "leader": "Abraham Lincoln",
        "cities": ["Washington", "New York", "Boston", "Philadelphia", "Atlanta", "Chicago",
                   "Buffalo", "St. Louis", "Detroit", "New Orleans", "Baltimore", "Denver",
                   "Cincinnati", "Dallas", "Los Angeles", "Las Vegas"],
    },
    "aztecs": {
        "name": "Aztec Empire", "adjective": "Aztec", "color": "#00DDDD", "leader": "Montezuma",
        "cities": ["Tenochtitlan", "Chiauhtia", "Chapultapec", "Coatepec", "Ayontzinco", "Itzapalapa",
                   "Itzapam", "Mitxcoac", "Tucubaya", "Tecamac", "Tepezinco", "Ticoman",
                   "Tlaxcala", "Xaltocan", "Xicalango", "Zumpanco"],
    },
    "babylonian": {
        "name": "Babylonians", "adjective": "Babylonian", "color": "#343434", "leader": "Hammurabi",
        "cities": ["Babylon", "Sumer", "Uruk", "Ninevah", "Ashur", "Ellipi",
                   "Akkad", "Eridu", "Kish", "Nippur", "Shuruppak", "Zariqum",
                   "Izibia", "Nimrud", "Arbela", "Zamua"],
    },
    "chinese": {
        "name": "Chinese", "adjective": "Chinese", "color": "#DC143C", "leader": "Mao Tse Tung",
        "cities": ["Peking", "Shanghai", "Canton", "Nanking", "Tsingtao", "Hangchow",
                   "Tientsin", "Tatung", "Macao", "Anyang", "Shantung", "Chinan",
                   "Kaifeng", "Ningpo", "Paoting", "Yangchow"],
    },
    "egyptian": {
        "name": "Egyptians", "adjective": "Egyptian", "color": "#00FFFF", "leader": "Cleopatra",
        "cities": ["Thebes", "Memphis", "Oryx", "Heliopolis", "Gaza", "Alexandria",
                   "Byblos", "Cairo", "Coptos", "Edfu", "Pithom", "Busirus",
                   "Athribus", "Mendes", "Tanis", "Abydos"],
    },
    "english": {
        "name": "English", "adjective": "English", "color": "#800080", "leader": "Elizabeth I",
        "cities": ["London", "Coventry", "Birmingham", "Dover", "Nottingham", "York",
                   "Liverpool", "Brighton", "Oxford", "Reading", "Exeter", "Cambridge",
                   "Hastings", "Canterbury", "Banbury", "Newcastle"],
    },
    "french": {
        "name": "French", "adjective": "French", "color": "#4169E1", "leader": "Napoleon",
        "cities": ["Paris", "Orleans", "Lyons", "Tours", "Chartres", "Bordeaux",
                   "Rouen", "Avignon", "Marseilles", "Grenoble", "Dijon", "Amiens",
                   "Cherbourg", "Poitiers", "Toulouse", "Bayonne"],
    },
    "german": {
        "name": "Germans", "adjective": "German", "color": "#2F4F4F", "leader": "Frederick",
        "cities": ["Berlin", "Leipzig", "Hamburg", "Bremen", "Frankfurt", "Bonn",
                   "Nuremberg", "Cologne", "Hannover", "Munich", "Stuttgart", "Heidelberg",
                   "Salzburg", "Konigsberg", "Dortmund", "Brandenburg"],
    },
    "greeks": {
        "name": "Greeks", "adjective": "Greek", "color": "#008000", "leader": "Alexander",
        "cities": ["Athens", "Sparta", "Corinth", "Delphi", "Eretria", "Pharsalos",
                   "Argos", "Mycenae", "Herakleia", "Antioch", "Ephesos", "Rhodes",
                   "Knossos", "Troy", "Pergamon", "Miletos"],
    },
    "indian": {
        "name": "Indians", "adjective": "Indian", "color": "#EEEEEE", "leader": "Gandhi",
        "cities": ["Delhi", "Bombay", "Madras", "Bangalore", "Calcutta", "Lahore",
                   "Karachi", "Kolhapur", "Jaipur", "Hyderbad", "Bengal", "Chittagong",
                   "Punjab", "Dacca", "Indus", "Ganges"],
    },
    "mongol": {
        "name": "Mongols", "adjective": "Mongol", "color": "#8B4513", "leader": "Genghis Khan",
        "cities": ["Samarkand", "Bokhara", "Nishapur", "Karakorum", "Kashgar", "Tabriz",
                   "Aleppo", "Kabul", "Ormuz", "Basra", "Khanbaryk", "Khorasan",
                   "Shangtu", "Kazan", "Qyinsay", "Kerman"],
    },
    "russian": {
        "name": "Russians", "adjective": "Russian", "color": "#556B2F", "leader": "Stalin",
        "cities": ["Moscow", "Leningrad", "Kiev", "Minsk", "Smolensk", "Odessa",
                   "Sevastopol", "Tiblisi", "Sverdlovsk", "Yakutsk", "Vladivostok", "Novograd",
                   "Krasnoyarsk", "Riga", "Rostov", "Atrakhan"],
    },
    "zulu": {
        "name": "Zulus", "adjective": "Zulu", "color": "#800000", "leader": "Shaka",
        "cities": ["Zimbabwe", "Ulundi", "Bapedi", "Hlobane", "Isandhlwana", "Intombe",
                   "Mpondo", "Ngome", "Swazi", "Tugela", "Umtata", "Umfolozi",
                   "Ibabanago", "Isipezi", "Amatikulu", "Zunquin"],
    },
}

CIV_ORDER = list(CIVS)

NAME_PREFIXES = [
    "New", "Old", "Great", "Little", "Upper", "Lower", "North", "South", "East", "West",
    "Fort", "Port", "Mount", "Lake", "River", "Valley", "Hill", "Stone", "Golden", "Silver",
]
NAME_SUFFIXES = [
    "town", "city", "burg", "holm", "ford", "haven", "port", "field", "wood", "hill",
    "vale", "stead", "bridge", "marsh", "grove", "ridge", "fall", "glen", "moor", "wick",
]


def get_civ_info(civ_id: str) -> dict:
    return CIVS.get(civ_id, CIVS["romans"])


def civ_for_index(index: int) -> str:
    return CIV_ORDER[index % len(CIV_ORDER)]


def next_city_name(player: Player, rng: random.Random, attempts: int = 50) -> str:
    """Pick the next unused name for a player's new city. Does not reserve it."""
    used = player.used_city_names
    for name in get_civ_info(player.civilization)["cities"]:
        if name not in used:
            return name
    name = "City"
    for _ in range(attempts):
        name = f"{rng.choice(NAME_PREFIXES)} {rng.choice(NAME_SUFFIXES)}"
        if name not in used:
            return name
    return f"{name} {len(used) + 1}"
