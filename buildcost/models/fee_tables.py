"""Fee scale tables for planning disciplines (HOAI 2021, zone III minimum).

Each table is a list of ``(chargeable_cost, full_fee)`` points, both net EUR.
Values between points are interpolated linearly; values outside are clamped
to the first/last point.
"""

from enum import Enum
from typing import Dict, List, Tuple

FeeTable = List[Tuple[float, float]]


class FeeDiscipline(Enum):
    """Planning discipline with its own fee scale."""

    ARCHITECTURE = "architecture"
    STRUCTURAL = "structural"
    BUILDING_SERVICES = "building_services"
    LANDSCAPE = "landscape"
    THERMAL = "thermal"
    ACOUSTICS = "acoustics"
    FIRE_PROTECTION = "fire_protection"
    DESIGN_SURVEY = "design_survey"
    CONSTRUCTION_SURVEY = "construction_survey"


ARCHITECTURE_FEES: FeeTable = [
    (25_000, 4_339), (35_000, 5_865), (50_000, 8_071), (75_000, 11_601),
    (100_000, 15_005), (150_000, 21_555), (200_000, 27_863), (300_000, 39_981),
    (500_000, 62_900), (750_000, 89_927), (1_000_000, 115_675),
    (1_500_000, 165_911), (2_000_000, 214_108), (3_000_000, 306_162),
    (5_000_000, 478_207), (7_500_000, 686_862), (10_000_000, 887_604),
    (15_000_000, 1_272_601), (20_000_000, 1_641_513), (25_000_000, 1_998_153),
    (30_000_000, 2_353_717), (35_000_000, 2_703_303), (40_000_000, 3_047_856),
    (45_000_000, 3_388_070), (50_000_000, 3_724_479), (55_000_000, 4_057_502),
    (60_000_000, 4_387_478), (65_000_000, 4_714_689), (70_000_000, 5_039_369),
    (75_000_000, 5_361_717), (100_000_000, 6_943_780), (150_000_000, 9_037_748),
    (200_000_000, 11_207_179), (250_000_000, 13_088_326),
    (300_000_000, 14_703_322), (400_000_000, 17_193_924),
    (500_000_000, 18_769_845),
]

STRUCTURAL_FEES: FeeTable = [
    (15_000, 2_841), (25_000, 4_247), (50_000, 7_327), (75_000, 10_080),
    (100_000, 12_639), (150_000, 17_380), (250_000, 25_951), (350_000, 33_776),
    (500_000, 44_633), (750_000, 61_401), (1_000_000, 76_984),
    (1_250_000, 91_740), (1_500_000, 105_865), (2_000_000, 132_684),
    (3_000_000, 182_321), (5_000_000, 271_781), (7_500_000, 373_640),
    (10_000_000, 468_166), (15_000_000, 642_943), (20_000_000, 806_479),
    (25_000_000, 961_469), (30_000_000, 1_109_974), (35_000_000, 1_253_295),
    (40_000_000, 1_392_323), (45_000_000, 1_527_703), (50_000_000, 1_659_923),
    (55_000_000, 1_789_364), (60_000_000, 1_916_331), (65_000_000, 2_076_025),
    (70_000_000, 2_235_719), (75_000_000, 2_395_413), (100_000_000, 3_193_884),
    (150_000_000, 3_634_244), (200_000_000, 4_384_505),
    (250_000_000, 5_011_873), (300_000_000, 5_537_421),
    (400_000_000, 6_366_153), (500_000_000, 7_055_362),
]

# Building services: x axis is the architecture zone IV maximum column,
# aligned row by row with the services zone III minimum fees.
BUILDING_SERVICES_FEES: FeeTable = [
    (6_094, 0), (8_237, 2_990), (11_336, 5_174), (16_293, 7_131),
    (21_074, 10_681), (30_274, 13_934), (39_134, 18_465), (56_153, 25_418),
    (88_343, 31_872), (126_301, 43_800), (162_464, 65_418), (233_022, 113_168),
    (300_714, 155_836), (430_003, 195_448), (671_640, 232_891),
    (964_694, 268_660), (1_246_635, 336_331), (1_787_360, 400_650),
    (2_305_496, 462_044), (2_806_395, 521_052), (3_305_782, 578_046),
    (3_796_774, 744_745), (4_280_696, 902_351), (4_758_526, 1_053_210),
    (5_231_009, 1_198_751), (5_698_738, 1_431_976), (6_162_189, 1_655_918),
    (6_621_754, 1_906_772), (7_077_765, 2_179_168), (7_530_501, 2_451_564),
    (9_752_500, 2_723_960), (12_693_466, 2_795_680), (15_740_421, 3_144_161),
    (18_382_480, 3_478_501), (20_650_733, 3_800_438),
    (24_148_769, 4_111_306), (26_362_142, 4_412_160),
]

# Services cost is split across system groups and each share is looked up
# separately, which yields a higher fee through the degressive scale.
BUILDING_SERVICES_SPLIT: Dict[str, float] = {
    "heating_water_gas": 0.57,
    "electrical": 0.34,
    "conveying": 0.07,
    "automation": 0.02,
}

LANDSCAPE_FEES: FeeTable = [
    (20_000, 5_229), (25_000, 6_325), (30_000, 7_388), (35_000, 8_426),
    (40_000, 9_441), (50_000, 11_416), (60_000, 13_332), (75_000, 16_116),
    (100_000, 20_574), (125_000, 24_855), (150_000, 28_998), (200_000, 36_958),
    (250_000, 44_576), (350_000, 59_066), (500_000, 79_383), (650_000, 99_212),
    (800_000, 118_326), (1_000_000, 142_942), (1_250_000, 172_600),
    (1_500_000, 201_261), (2_000_000, 257_439), (2_500_000, 311_614),
    (3_000_000, 364_245), (3_500_000, 415_627), (4_000_000, 465_964),
    (4_500_000, 515_405), (6_000_000, 659_377), (10_000_000, 1_021_300),
    (15_000_000, 1_445_534), (20_000_000, 1_796_310), (25_000_000, 2_157_978),
    (30_000_000, 2_503_469), (35_000_000, 2_835_127), (40_000_000, 3_154_621),
    (45_000_000, 3_463_209), (50_000_000, 3_761_879), (75_000_000, 5_130_522),
    (100_000_000, 6_333_016), (150_000_000, 8_379_268),
    (200_000_000, 10_096_151), (250_000_000, 11_615_404),
]

# Thermal insulation and energy balance; also used for acoustics.
THERMAL_FEES: FeeTable = [
    (250_000, 6_137), (300_000, 6_211), (350_000, 6_285), (400_000, 6_359),
    (450_000, 6_433), (500_000, 6_507), (1_000_000, 7_245), (1_500_000, 7_984),
    (2_000_000, 8_722), (2_500_000, 9_460), (3_000_000, 10_199),
    (3_500_000, 10_937), (4_000_000, 11_676), (4_500_000, 12_414),
    (5_000_000, 13_153), (10_000_000, 20_537), (15_000_000, 27_921),
    (20_000_000, 35_305), (25_000_000, 42_690), (30_000_000, 55_324),
    (35_000_000, 63_255), (40_000_000, 67_330), (45_000_000, 74_640),
    (50_000_000, 81_868), (55_000_000, 89_022), (60_000_000, 96_110),
    (65_000_000, 103_139), (70_000_000, 110_112), (75_000_000, 117_034),
    (80_000_000, 123_909), (85_000_000, 130_741), (90_000_000, 137_532),
    (95_000_000, 144_285), (100_000_000, 151_001),
]

DESIGN_SURVEY_FEES: FeeTable = [
    (51_129, 2_761), (100_000, 3_934), (150_000, 5_038), (200_000, 5_952),
    (250_000, 6_761), (300_000, 7_472), (350_000, 8_215), (400_000, 8_923),
    (450_000, 9_664), (500_000, 10_375), (750_000, 12_729),
    (1_000_000, 15_029), (1_500_000, 19_629), (2_000_000, 24_229),
    (2_500_000, 28_829), (3_000_000, 33_429), (3_500_000, 38_029),
    (4_000_000, 42_629), (4_500_000, 47_229), (5_000_000, 51_829),
    (7_500_000, 74_829), (10_000_000, 97_829),
]

CONSTRUCTION_SURVEY_FEES: FeeTable = [
    (250_000, 2_284), (275_000, 2_431), (300_000, 2_574), (350_000, 2_847),
    (400_000, 3_108), (500_000, 3_598), (600_000, 4_055), (750_000, 4_694),
    (1_000_000, 5_669), (1_250_000, 6_563), (1_500_000, 7_397),
    (2_000_000, 8_934), (2_500_000, 10_343), (3_500_000, 12_901),
    (5_000_000, 16_307), (7_500_000, 21_287), (10_000_000, 25_719),
    (15_000_000, 33_582), (20_000_000, 40_583), (25_000_000, 47_008),
    (30_000_000, 53_007), (35_000_000, 58_675), (40_000_000, 64_075),
    (45_000_000, 69_251), (50_000_000, 74_235), (55_000_000, 79_053),
    (60_000_000, 83_726), (65_000_000, 88_269), (70_000_000, 92_695),
    (75_000_000, 97_017),
]

FEE_TABLES: Dict[FeeDiscipline, FeeTable] = {
    FeeDiscipline.ARCHITECTURE: ARCHITECTURE_FEES,
    FeeDiscipline.STRUCTURAL: STRUCTURAL_FEES,
    FeeDiscipline.BUILDING_SERVICES: BUILDING_SERVICES_FEES,
    FeeDiscipline.LANDSCAPE: LANDSCAPE_FEES,
    FeeDiscipline.THERMAL: THERMAL_FEES,
    FeeDiscipline.ACOUSTICS: THERMAL_FEES,
    FeeDiscipline.DESIGN_SURVEY: DESIGN_SURVEY_FEES,
    FeeDiscipline.CONSTRUCTION_SURVEY: CONSTRUCTION_SURVEY_FEES,
}

# Work phase shares 1-9 commissioned per discipline.
WORK_PHASE_SHARES: Dict[FeeDiscipline, Tuple[float, ...]] = {
    FeeDiscipline.ARCHITECTURE: (0.02, 0.07, 0.15, 0.03, 0.25, 0.10, 0.04, 0.32, 0.00),
    FeeDiscipline.STRUCTURAL: (0.03, 0.10, 0.15, 0.30, 0.40, 0.02, 0.00, 0.00, 0.00),
    FeeDiscipline.BUILDING_SERVICES: (0.02, 0.09, 0.17, 0.02, 0.22, 0.07, 0.05, 0.35, 0.00),
    FeeDiscipline.LANDSCAPE: (0.03, 0.10, 0.16, 0.04, 0.25, 0.07, 0.03, 0.30, 0.00),
    FeeDiscipline.THERMAL: (0.03, 0.20, 0.40, 0.06, 0.27, 0.02, 0.02, 0.00, 0.00),
    FeeDiscipline.ACOUSTICS: (0.03, 0.20, 0.40, 0.06, 0.27, 0.02, 0.02, 0.00, 0.00),
    FeeDiscipline.FIRE_PROTECTION: (0.01, 0.15, 0.19, 0.15, 0.18, 0.00, 0.00, 0.32, 0.00),
    FeeDiscipline.DESIGN_SURVEY: (0.18, 0.82, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    FeeDiscipline.CONSTRUCTION_SURVEY: (0.0, 0.0, 0.0, 0.0, 0.02, 0.0, 0.0, 0.98, 0.0),
}

DEFAULT_ENABLED_DISCIPLINES = frozenset({
    FeeDiscipline.ARCHITECTURE,
    FeeDiscipline.STRUCTURAL,
    FeeDiscipline.BUILDING_SERVICES,
    FeeDiscipline.THERMAL,
    FeeDiscipline.FIRE_PROTECTION,
})

# Design survey chargeable cost is scaled down by band.
DESIGN_SURVEY_SCALING: List[Tuple[float, float]] = [
    (511_292, 0.40),
    (1_022_584, 0.35),
    (2_556_459, 0.30),
]
DESIGN_SURVEY_SCALING_ABOVE = 0.25

CONSTRUCTION_SURVEY_SHARE = 0.8
CONSTRUCTION_SURVEY_CAP = 10_225_000

# Fire protection is a flat formula on floor area, not a table.
FIRE_PROTECTION_BASE = 2300.0
FIRE_PROTECTION_COEFFICIENT = 130.0
FIRE_PROTECTION_EXPONENT = 0.61
