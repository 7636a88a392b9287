# Clustering / view
CLUSTER_THRESHOLD = 50
MAX_COMMUNITY_PASSES = 10
EXPANSION_JITTER = 2.0
EXPANSION_ITERATIONS = 30

# Force layout
ITERATIONS = 100
DAMPING = 0.8
REPULSION_FORCE = 1.0
ATTRACTION_FORCE = 0.1
MAX_STEP = 5.0
SEED = 42
SEED_SPREAD = 10.0
RADIAL_RING_STEP = 10.0
RADIAL_DEPTH_STEP = -5.0

# Edge geometry
CURVE_RESOLUTION = 50
CURVE_BEND = 0.2

# Node display
NODE_SIZE_PER_DEGREE = 10
NODE_SIZE_MIN = 30
NODE_SIZE_MAX = 80

# Quality gate
MIN_EDGE_WEIGHT = 0.3
MIN_EDGE_CONFIDENCE = 0.5

# Animation
ANIMATION_DURATION_MS = 500
EASING_ID = "easeInOutCubic"

# Extraction
COOCCURRENCE_WINDOW = 50
CONTEXT_SUPPORT_WINDOW = 100
SIMILARITY_THRESHOLD = 0.5
MAX_KEYWORDS = 20
CONTEXT_RELATION_WEIGHT = 0.3
SEQUENTIAL_RELATION_WEIGHT = 0.4
DEFAULT_BASE_WEIGHT = 0.5
DEFAULT_TYPE_CONFIDENCE = 0.7

DEBUG = False

SAMPLE_TEXT = "猫是一种动物。动物需要食物。"
