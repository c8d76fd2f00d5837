# Simulation Configuration
import os

# Grid Settings
GRID_SIZE = 3
WIDTH = 800.0
HEIGHT = 600.0
T_JUNCTION_PROBABILITY = 0.4

# Signal Timings
CYCLE_MS = 30000.0        # Full fixed-time cycle (15s per axis)
ADAPTIVE_MARGIN = 3       # Queue difference that triggers congestion preemption
DETECTION_WINDOW = 150.0  # Queue detection band length behind the stop line

# Vehicle Physics
ACCELERATION = 0.2       # units/tick
DECELERATION = 0.5       # units/tick
MOVE_EPSILON = 0.1       # Below this speed the position is frozen
CAUTION_FACTOR = 0.7     # Approach speed when a red is far ahead
FOLLOW_FACTOR = 0.9      # Fraction of the leader's speed a follower may hold
CRAWL_SPEED = 0.2        # Following targets below this snap to a full stop

# Traffic Rules
STOP_LINE_DISTANCE = 115.0  # Distance from intersection center to stop line
HARD_STOP_GAP = 3.0
BRAKE_ZONE = 60.0
TURN_THRESHOLD = 15.0       # Distance to center that triggers a turn decision
STRAIGHT_PROBABILITY = 0.7
LATERAL_TOLERANCE = 65.0    # Half-width of the band used to match a road
LANE_OFFSET = 32.0
LANE_TOLERANCE = 5.0
SAFE_GAP = 75.0

# Population
MAX_VEHICLES = 52
SPAWN_CHANCE = 0.2
SPAWN_MARGIN = 50.0   # Spawn distance outside the visible plane
CULL_MARGIN = 350.0   # Vehicles beyond this margin are removed

# Kernel
TICK_INTERVAL_MS = 50
HISTORY_INTERVAL_TICKS = 20
HISTORY_LENGTH = 30
SEED = int(os.getenv("SIGNAL_GRID_SEED", "42"))
LOG_LEVEL = os.getenv("SIGNAL_GRID_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("SIGNAL_GRID_LOG_FILE", "signal_grid.log")

# API server
HOST = os.getenv("SIGNAL_GRID_HOST", "0.0.0.0")
PORT = int(os.getenv("SIGNAL_GRID_PORT", "8000"))

# Advisory service
INSIGHT_API_KEY = os.getenv("INSIGHT_API_KEY", os.getenv("API_KEY", ""))
INSIGHT_MODEL = os.getenv("INSIGHT_MODEL", "gemini-2.5-flash")
INSIGHT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
INSIGHT_TIMEOUT = 20.0

SPAWN_TYPE_POOL = ["car", "car", "bike", "bike", "auto", "bus"]

VEHICLE_CONFIGS = {
    "bike": {"speed_range": (4.0, 5.5), "color": "#22d3ee"},
    "car": {"speed_range": (3.2, 4.5), "color": "#f8fafc"},
    "auto": {"speed_range": (2.5, 3.8), "color": "#facc15"},
    "bus": {"speed_range": (1.8, 2.8), "color": "#10b981"},
    "ambulance": {"speed_range": (5.5, 7.0), "color": "#ffffff"},
    "police": {"speed_range": (6.0, 7.5), "color": "#1e3a8a"},
}

ROAD_NAMES_POOL = [
    "Anna Salai", "Mount Road", "GST Road", "OMR", "ECR",
    "Avinashi Road", "Race Course", "Vanjimalai", "Perur Main Road",
    "Netaji Road", "Kamrajar Salai", "Goripalayam Jct", "Theni Road",
    "Chatram Road", "Tanjore Road", "Karur Bypass", "Woraiyur",
]

LOCATIONS = [
    {"name": "Chennai (Anna Salai)", "lat": 13.0405, "lng": 80.2337,
     "description": "Major arterial road with extreme bus and corporate traffic."},
    {"name": "Coimbatore (Gandhipuram)", "lat": 11.0168, "lng": 76.9558,
     "description": "High shopping hub density with massive two-wheeler volume."},
    {"name": "Madurai (Goripalayam)", "lat": 9.9252, "lng": 78.1198,
     "description": "Dense temple city junctions with high pedestrian and auto-rickshaw flow."},
    {"name": "Trichy (Chatram)", "lat": 10.8214, "lng": 78.6923,
     "description": "Strategic river crossing bridge with mixed interstate heavy transit."},
]
