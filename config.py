# config.py

# --- Window ---
WINDOW_TITLE = "Meditation"
BG_COLOR = "#000000"
FG_COLOR = "#ffffff"
CARD_COLOR = "#111111"

FONT_TITLE = ("Helvetica", 24, "bold")
FONT_PHASE = ("Helvetica", 20)
FONT_TIME = ("Consolas", 56)
FONT_BUTTON = ("Helvetica", 13, "bold")

BUTTON_COLORS = {
    "start": "#222222",
    "pause": "#555555",
    "resume": "#0a84ff",
    "reset": "#b52424",
}

# --- Timing (milliseconds) ---
TICK_INTERVAL_MS = 1000
PHASE_PAUSE_MS = 3500

# --- Speech ---
# espeak words-per-minute and pitch (0-99); slow and low for a guided session
SPEECH_COMMAND = "espeak"
SPEECH_VOICE = "en-us"
SPEECH_RATE_WPM = 120
SPEECH_PITCH = 32
SPEECH_STOP_TIMEOUT_S = 0.05

COMPLETION_MESSAGE = "Meditation session completed. Namaste."
IDLE_PHASE_TEXT = "Ready"

# --short demo mode
SHORT_PHASE_SECONDS = 5
