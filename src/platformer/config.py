import pygame

# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60

# --- World / Physics (per tick, y-down) ---
GRAVITY = 0.5               # added to vy every tick
JUMP_STRENGTH = -12.0       # vy on a grounded jump
DOUBLE_JUMP_FACTOR = 0.9    # second jump = JUMP_STRENGTH * factor
MOVE_SPEED = 5.0
FRICTION = 0.8              # vx decay when no horizontal key is held
SPIN_RATE = 0.1             # radians per airborne tick (cosmetic)
CAMERA_LEAD = 0.25          # player sits at this fraction of the view width

# --- Player ---
PLAYER_START_X = 100.0
PLAYER_START_Y = 50.0
PLAYER_W = 20
PLAYER_H = 20

# --- Level generation ---
PLATFORM_THICKNESS = 20
START_PLATFORM_W = 400
START_PLATFORM_RISE = 300   # start platform top, measured up from the viewport floor
START_PLATFORM_COUNT = 5    # platforms pre-seeded (with food) at run start
PLATFORM_MIN_W = 80
PLATFORM_MAX_W = 150
PLATFORM_MIN_GAP = 50
PLATFORM_GAP_JITTER = 100
PLATFORM_BAND_LOW = 150     # platform tops sit 150..300 above the floor
PLATFORM_BAND_SPAN = 150
LOOKAHEAD_SCREENS = 2.0
EVICT_BEHIND_PX = WIDTH     # drop platforms this far behind the camera

# Cumulative thresholds for one draw: <0.15 moving, <0.25 bouncy, <0.35 vertical
MOVING_THRESHOLD = 0.15
BOUNCY_THRESHOLD = 0.25
MOVING_VERTICAL_THRESHOLD = 0.35

# --- Moving / bouncy platform parameters ---
MOVING_PLATFORM_SPEED = 1.5
MOVING_PLATFORM_RANGE = 60.0
MOVING_VERTICAL_SPEED = 1.0
MOVING_VERTICAL_RANGE = 50.0
BOUNCE_STRENGTH = -15.0

# --- Collectibles ---
FOOD_SIZE = 15
FOOD_OFFSET_Y = 25          # food hovers this far above the platform top
FOOD_CHANCE_MIN = 0.2
FOOD_CHANCE_MAX = 0.7
FOOD_BOUNCE_RATE = 0.1
FOOD_BOUNCE_AMPLITUDE = 3.0
FOOD_POINTS = 10
POWERUP_CHANCE = 0.05
POWERUP_SIZE = 20
POWERUP_OFFSET_Y = 60
POWERUP_SPIN_RATE = 0.05
SPEED_BOOST_MULTIPLIER = 1.8
SPEED_BOOST_TICKS = 300

# --- Combo ---
COMBO_WINDOW_TICKS = 120
COMBO_MAX_MULTIPLIER = 10

# --- Effects ---
PARTICLE_GRAVITY = 0.15
MAX_PARTICLES = 800
RUN_SPEED_THRESHOLD = 0.5   # |vx| above this counts as running
ORBIT_VISIBLE_SPEED = 1.0
FOOD_BURST_COUNT = 10
POWERUP_BURST_COUNT = 16

# --- Cheat code ---
CHEAT_CODE = "moneybags"
CHEAT_BONUS = 1000
CHEAT_MESSAGE_TICKS = 180

# --- Keys ---
LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
JUMP_KEYS = (pygame.K_UP, pygame.K_w, pygame.K_SPACE)

# --- Persistence ---
SAVE_PATH_DEFAULT = "~/.endless_platformer/save.json"

# --- Colors (RGB) ---
COLOR_BG = (211, 211, 211)
COLOR_FG = (40, 40, 40)
COLOR_PLAYER = (128, 128, 128)
COLOR_PLAT = (105, 105, 105)
COLOR_FOOD = (169, 169, 169)
COLOR_FOOD_BURST = (255, 200, 60)
COLOR_POWERUP = (80, 170, 255)
COLOR_DANGER = (255, 86, 110)
