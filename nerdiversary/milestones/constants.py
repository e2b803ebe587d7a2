"""Milestone tables: time units, number sequences and the curated milestone lists."""
import math

# ============================================================================
# TIME CONSTANTS (milliseconds)
# ============================================================================

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_WEEK = 7 * MS_PER_DAY
MS_PER_YEAR = 31_556_952_000  # 365.2425 days, Gregorian average
MS_PER_MONTH = 2_629_746_000  # 30.4375 days

# ============================================================================
# MATHEMATICAL / PHYSICAL CONSTANTS
# ============================================================================

PI = math.pi
E = math.e
PHI = (1 + math.sqrt(5)) / 2
TAU = 2 * math.pi
E_TO_PI = math.e ** math.pi
SPEED_OF_LIGHT = 299_792_458  # m/s

# ============================================================================
# PLANETARY DATA (orbital period in Earth days)
# ============================================================================

PLANETS = {
    "mercury": {"name": "Mercury", "days": 87.969, "icon": "☿️"},
    "venus": {"name": "Venus", "days": 224.701, "icon": "♀️"},
    "mars": {"name": "Mars", "days": 686.980, "icon": "♂️"},
    "jupiter": {"name": "Jupiter", "days": 4332.59, "icon": "♃"},
    "saturn": {"name": "Saturn", "days": 10759.22, "icon": "♄"},
    "uranus": {"name": "Uranus", "days": 30688.5, "icon": "⛢"},
    "neptune": {"name": "Neptune", "days": 60182, "icon": "♆"},
}
MAX_PLANETARY_ORBITS = 200

# ============================================================================
# NUMBER SEQUENCES
# ============================================================================

FIBONACCI = [
    1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233, 377, 610, 987, 1597, 2584, 4181,
    6765, 10946, 17711, 28657, 46368, 75025, 121393, 196418, 317811, 514229,
    832040, 1346269, 2178309, 3524578, 5702887, 9227465, 14930352, 24157817,
    39088169, 63245986, 102334155, 165580141, 267914296, 433494437, 701408733,
    1134903170, 1836311903, 2971215073,
]

# Like Fibonacci but seeded with 2, 1
LUCAS = [
    2, 1, 3, 4, 7, 11, 18, 29, 47, 76, 123, 199, 322, 521, 843, 1364, 2207, 3571,
    5778, 9349, 15127, 24476, 39603, 64079, 103682, 167761, 271443, 439204,
    710647, 1149851, 1860498, 3010349, 4870847, 7881196, 12752043, 20633239,
    33385282, 54018521, 87403803,
]

# 1-based positions within each sequence
FIBONACCI_INDEX = {value: i + 1 for i, value in enumerate(FIBONACCI)}
LUCAS_INDEX = {value: i + 1 for i, value in enumerate(LUCAS)}

PERFECT_NUMBERS = [6, 28, 496, 8128]
PERFECT_HOURS = [496, 8128]

# T(n) = n(n+1)/2 for n = 1..100
TRIANGULAR = [n * (n + 1) // 2 for n in range(1, 101)]
TRIANGULAR_INDEX = {value: i for i, value in enumerate(TRIANGULAR)}
NOTABLE_TRIANGULAR = {666, 5050, 1225, 2016, 3003, 5778, 8128}

PALINDROMES = [
    101, 111, 121, 131, 141, 151, 161, 171, 181, 191, 202, 212, 303, 313, 404, 414,
    505, 515, 606, 616, 707, 717, 808, 818, 909, 919, 1001, 1111, 1221, 1331, 1441,
    1551, 1661, 1771, 1881, 1991, 2002, 2112, 2222, 2332, 2442, 2552, 2662, 2772,
    2882, 2992, 3003, 3113, 3223, 3333, 4004, 4114, 4224, 4334, 4444, 5005, 5115,
    5225, 5335, 5445, 5555, 6006, 6116, 6226, 6336, 6446, 6556, 6666, 7007, 7117,
    7227, 7337, 7447, 7557, 7667, 7777, 8008, 8118, 8228, 8338, 8448, 8558, 8668,
    8778, 8888, 9009, 9119, 9229, 9339, 9449, 9559, 9669, 9779, 9889, 9999, 10001,
    10101, 10201, 11011, 11111, 11211, 11311, 11411, 11511, 11611, 11711, 11811,
    11911, 12021, 12121, 12221, 12321,
]
NOTABLE_PALINDROME_DAYS = {
    1001, 1221, 1331, 1441, 2112, 2552, 3003, 5005, 5775, 7007, 7337, 9009,
    10001, 10101, 11011, 11111, 12321, 12921,
}
PALINDROME_HOURS = [10001, 10101, 10201, 11011, 11111, 11211, 12021, 12121, 12221, 12321]

REPUNITS = [11, 111, 1111, 11111, 111111, 1111111, 11111111]

POWERS_OF_2_SECONDS = list(range(20, 33))
POWERS_OF_2_MINUTES = list(range(15, 26))

HEX_SECONDS = [
    (0x100000, "0x100000"),
    (0x1000000, "0x1000000"),
    (0xFFFFFF, "0xFFFFFF"),
    (0x10000000, "0x10000000"),
    (0xDEADBEEF, "0xDEADBEEF"),
]

# ============================================================================
# DECIMAL MILESTONE LISTS: (count, label, short)
# ============================================================================

SECOND_MILESTONES = [
    (1_000_000, "1 Million Seconds", "10⁶ seconds"),
    (10_000_000, "10 Million Seconds", "10⁷ seconds"),
    (50_000_000, "50 Million Seconds", "5×10⁷ seconds"),
    (100_000_000, "100 Million Seconds", "10⁸ seconds"),
    (250_000_000, "250 Million Seconds", "2.5×10⁸ seconds"),
    (500_000_000, "500 Million Seconds", "5×10⁸ seconds"),
    (750_000_000, "750 Million Seconds", "7.5×10⁸ seconds"),
    (1_000_000_000, "1 Billion Seconds", "10⁹ seconds"),
    (1_111_111_111, "1,111,111,111 Seconds", "1.1B repunit seconds"),
    (1_234_567_890, "1,234,567,890 Seconds", "sequential digits!"),
    (1_300_000_000, "1.3 Billion Seconds", "1.3×10⁹ seconds"),
    (1_400_000_000, "1.4 Billion Seconds", "1.4×10⁹ seconds"),
    (1_500_000_000, "1.5 Billion Seconds", "1.5×10⁹ seconds"),
    (2_000_000_000, "2 Billion Seconds", "2×10⁹ seconds"),
    (2_500_000_000, "2.5 Billion Seconds", "2.5×10⁹ seconds"),
    (3_000_000_000, "3 Billion Seconds", "3×10⁹ seconds"),
]

MINUTE_MILESTONES = [
    (100_000, "100,000 Minutes", "10⁵ minutes"),
    (500_000, "500,000 Minutes", "5×10⁵ minutes"),
    (1_000_000, "1 Million Minutes", "10⁶ minutes"),
    (2_000_000, "2 Million Minutes", "2×10⁶ minutes"),
    (3_000_000, "3 Million Minutes", "3×10⁶ minutes"),
    (5_000_000, "5 Million Minutes", "5×10⁶ minutes"),
    (7_500_000, "7.5 Million Minutes", "7.5×10⁶ minutes"),
    (10_000_000, "10 Million Minutes", "10⁷ minutes"),
    (15_000_000, "15 Million Minutes", "1.5×10⁷ minutes"),
    (20_000_000, "20 Million Minutes", "2×10⁷ minutes"),
    (21_000_000, "21 Million Minutes", "21×10⁶ minutes"),
    (22_000_000, "22 Million Minutes", "22×10⁶ minutes"),
    (22_222_222, "22,222,222 Minutes", "repdigit minutes"),
    (23_000_000, "23 Million Minutes", "23×10⁶ minutes"),
    (24_000_000, "24 Million Minutes", "24×10⁶ minutes"),
    (25_000_000, "25 Million Minutes", "2.5×10⁷ minutes"),
    (30_000_000, "30 Million Minutes", "3×10⁷ minutes"),
    (40_000_000, "40 Million Minutes", "4×10⁷ minutes"),
    (50_000_000, "50 Million Minutes", "5×10⁷ minutes"),
]

HOUR_MILESTONES = [
    (10_000, "10,000 Hours", "10⁴ hours"),
    (25_000, "25,000 Hours", "2.5×10⁴ hours"),
    (50_000, "50,000 Hours", "5×10⁴ hours"),
    (75_000, "75,000 Hours", "7.5×10⁴ hours"),
    (100_000, "100,000 Hours", "10⁵ hours"),
    (150_000, "150,000 Hours", "1.5×10⁵ hours"),
    (200_000, "200,000 Hours", "2×10⁵ hours"),
    (250_000, "250,000 Hours", "2.5×10⁵ hours"),
    (300_000, "300,000 Hours", "3×10⁵ hours"),
    (400_000, "400,000 Hours", "4×10⁵ hours"),
    (500_000, "500,000 Hours", "5×10⁵ hours"),
    (600_000, "600,000 Hours", "6×10⁵ hours"),
    (750_000, "750,000 Hours", "7.5×10⁵ hours"),
    (1_000_000, "1 Million Hours", "10⁶ hours"),
]

DAY_MILESTONES = [
    (1000, "1,000 Days", "10³ days"),
    (1500, "1,500 Days", "1.5×10³ days"),
    (2000, "2,000 Days", "2×10³ days"),
    (2500, "2,500 Days", "2.5×10³ days"),
    (3000, "3,000 Days", "3×10³ days"),
    (4000, "4,000 Days", "4×10³ days"),
    (5000, "5,000 Days", "5×10³ days"),
    (6000, "6,000 Days", "6×10³ days"),
    (7000, "7,000 Days", "7×10³ days"),
    (7500, "7,500 Days", "7.5×10³ days"),
    (8000, "8,000 Days", "8×10³ days"),
    (9000, "9,000 Days", "9×10³ days"),
    (10000, "10,000 Days", "10⁴ days"),
    (11111, "11,111 Days", "11,111 days"),
    (12345, "12,345 Days", "12,345 days"),
    (15000, "15,000 Days", "1.5×10⁴ days"),
    (16000, "16,000 Days", "1.6×10⁴ days"),
    (16384, "16,384 Days", "2¹⁴ days"),
    (17000, "17,000 Days", "1.7×10⁴ days"),
    (17500, "17,500 Days", "1.75×10⁴ days"),
    (18000, "18,000 Days", "1.8×10⁴ days"),
    (20000, "20,000 Days", "2×10⁴ days"),
    (22222, "22,222 Days", "22,222 days"),
    (25000, "25,000 Days", "2.5×10⁴ days"),
    (27500, "27,500 Days", "2.75×10⁴ days"),
    (30000, "30,000 Days", "3×10⁴ days"),
    (33333, "33,333 Days", "33,333 days"),
]

WEEK_MILESTONES = [
    (250, "250 Weeks", "250 weeks"),
    (500, "500 Weeks", "500 weeks"),
    (750, "750 Weeks", "750 weeks"),
    (1000, "1,000 Weeks", "10³ weeks"),
    (1250, "1,250 Weeks", "1,250 weeks"),
    (1500, "1,500 Weeks", "1,500 weeks"),
    (1750, "1,750 Weeks", "1,750 weeks"),
    (2000, "2,000 Weeks", "2×10³ weeks"),
    (2100, "2,100 Weeks", "2,100 weeks"),
    (2200, "2,200 Weeks", "2,200 weeks"),
    (2222, "2,222 Weeks", "repdigit weeks"),
    (2300, "2,300 Weeks", "2,300 weeks"),
    (2400, "2,400 Weeks", "2,400 weeks"),
    (2500, "2,500 Weeks", "2,500 weeks"),
    (3000, "3,000 Weeks", "3×10³ weeks"),
]

MONTH_MILESTONES = [
    (100, "100 Months", "100 months"),
    (200, "200 Months", "200 months"),
    (250, "250 Months", "250 months"),
    (300, "300 Months", "300 months"),
    (400, "400 Months", "400 months"),
    (444, "444 Months", "repdigit months"),
    (500, "500 Months", "500 months"),
    (555, "555 Months", "repdigit months"),
    (600, "600 Months", "600 months"),
    (666, "666 Months", "number of the beast months"),
    (750, "750 Months", "750 months"),
    (1000, "1,000 Months", "10³ months"),
]

# ============================================================================
# NUMBER BASES: base -> (name, icon, {unit: powers})
# ============================================================================

UNIT_MS = {
    "seconds": MS_PER_SECOND,
    "minutes": MS_PER_MINUTE,
    "hours": MS_PER_HOUR,
    "days": MS_PER_DAY,
}

BASE_MILESTONES = [
    (3, "ternary", "🔺", {
        "seconds": [15, 16, 17, 18, 19, 20],
        "minutes": [11, 12, 13, 14, 15],
        "hours": [8, 9, 10, 11, 12],
        "days": [6, 7, 8, 9],
    }),
    (5, "quinary", "🖐️", {
        "seconds": [10, 11, 12, 13, 14],
        "minutes": [8, 9, 10, 11],
        "hours": [6, 7, 8, 9],
        "days": [5, 6, 7],
    }),
    (6, "senary", "🎲", {
        "seconds": [9, 10, 11, 12, 13],
        "minutes": [7, 8, 9, 10],
        "hours": [5, 6, 7, 8],
        "days": [4, 5, 6],
    }),
    (7, "septenary", "🌈", {
        "seconds": [8, 9, 10, 11, 12],
        "minutes": [6, 7, 8, 9],
        "hours": [5, 6, 7, 8],
        "days": [4, 5, 6],
    }),
    (8, "octal", "🐙", {
        "seconds": [7, 8, 9, 10, 11],
        "minutes": [5, 6, 7, 8],
        "hours": [4, 5, 6, 7],
        "days": [3, 4, 5, 6],
    }),
    (12, "dozenal", "🕛", {
        "seconds": [6, 7, 8, 9],
        "minutes": [5, 6, 7],
        "hours": [4, 5, 6],
        "days": [3, 4, 5],
    }),
    (16, "hexadecimal", "🔷", {
        "seconds": [7, 8],
        "minutes": [5, 6, 7],
        "hours": [4, 5],
        "days": [3, 4],
    }),
    (20, "vigesimal", "🏛️", {
        "seconds": [6, 7, 8],
        "minutes": [5, 6],
        "hours": [4, 5],
        "days": [3, 4],
    }),
    (60, "Babylonian", "⏰", {
        "seconds": [4, 5],
        "minutes": [3, 4],
        "hours": [2, 3],
        "days": [2],
    }),
]

# ============================================================================
# INTEGER SEQUENCES PER UNIT: non-overlapping value ranges per time unit
# ============================================================================

SEQUENCE_UNIT_RANGES = [
    ("seconds", 1_000_000, 3_000_000_000),
    ("minutes", 100_000, 50_000_000),
    ("hours", 10_000, 1_000_000),
    ("days", 100, 40_000),
]

REPUNIT_UNIT_RANGES = [
    ("days", 111, 11_111),
    ("hours", 1_111, 111_111),
    ("minutes", 111_111, 11_111_111),
    ("seconds", 11_111_111, 1_111_111_111),
]

MATH_CONSTANTS = [
    # (key, symbol, display text, value)
    ("pi", "π", "π", PI),
    ("e", "e", "e", E),
    ("phi", "φ", "golden ratio", PHI),
    ("tau", "τ", "τ (2π)", TAU),
]
MATH_MULTIPLIERS = [(10_000_000, "⁷"), (100_000_000, "⁸"), (1_000_000_000, "⁹")]

E_TO_PI_MULTIPLIERS = [(1_000_000, "Million"), (10_000_000, "10 Million"), (100_000_000, "100 Million")]

POP_CULTURE_MILESTONES = [
    # (count, unit ms, label, icon, description)
    (42_000_000, MS_PER_SECOND, "42 Million Seconds", "🌌", "The Answer to Life, the Universe, and Everything!"),
    (1337, MS_PER_DAY, "1,337 Days", "🎮", "You are now officially 1337 (elite)!"),
]

# ============================================================================
# CALENDAR-RECURRING
# ============================================================================

CALENDAR_YEARS = 120

NERDY_HOLIDAYS = [
    # (month, day, name, icon, description)
    (3, 14, "Pi Day", "🥧", "March 14 (3.14)"),
    (5, 4, "May the 4th", "⚔️", "Star Wars Day"),
    (6, 28, "Tau Day", "🌀", "June 28 (τ ≈ 6.28)"),
]

PRIME_AGES = {
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71,
    73, 79, 83, 89, 97, 101, 103, 107, 109, 113,
}
SQUARE_AGES = {4: "2²", 9: "3²", 16: "4²", 25: "5²", 36: "6²", 49: "7²", 64: "8²", 81: "9²", 100: "10²"}
POWER_OF_2_AGES = {2: "2¹", 4: "2²", 8: "2³", 16: "2⁴", 32: "2⁵", 64: "2⁶"}
CUBE_AGES = {8: "2³", 27: "3³", 64: "4³"}
HEX_ROUND_AGES = {16: "0x10", 32: "0x20", 48: "0x30", 64: "0x40", 80: "0x50", 96: "0x60", 112: "0x70"}

_SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def to_superscript(num: int) -> str:
    return str(num).translate(_SUPERSCRIPTS)


def get_ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
