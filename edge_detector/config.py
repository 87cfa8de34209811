"""Configuration for the edge detector."""

# Operators, in display order
OPERATOR_NAMES = ("sobel", "roberts", "prewitt", "laplace", "canny")

# Threshold settings
DEFAULT_THRESHOLD = 50
THRESHOLD_MIN = 0
THRESHOLD_MAX = 255
THRESHOLD_STEP = 5  # +/- key step in the demo window

# Buffer settings
DEFAULT_CHANNEL_ORDER = "RGBA"
OPAQUE = 255

# Camera settings (ideal capture size, the device may pick another)
CAMERA_INDEX = 0
CAPTURE_WIDTH = 640
CAPTURE_HEIGHT = 480

# Display settings
WINDOW_TITLE = "Edge Detection"
LABEL_HEIGHT = 30

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
