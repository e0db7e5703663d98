"""All magic numbers and configuration constants."""

MODE_MEDITATION = "meditation"              # narrator mode while a session runs
MODE_NORMAL = "normal"                      # narrator mode outside sessions
CLOSING_REMARK = (
    "Your meditation is complete. Take a moment to notice how you feel. "
    "Carry this remembrance with you throughout your day."
)
DEFAULT_SCRIPT = "smriti_meditation"
GUIDE_NAME = "Dr. Helen Thomas"             # artist tag on rendered files
TTS_RETRY_COUNT = 3                         # max retries per TTS clip
TTS_RETRY_BASE_DELAY = 1.0                  # seconds — base delay for exponential backoff
TTS_RATE = "-10%"                           # normal speech rate
MEDITATION_RATE = "-20%"                    # slower, softer delivery during sessions
GUIDE_VOICE = "en-US-JennyNeural"           # warm, calm narrator voice
PLAYER_COMMAND = "ffplay"                   # audio player used for live sessions
DRONE_LOOP_SECONDS = 30                     # duration of generated drone loop
DRONE_BED_DB = -28                          # drone volume under the spoken lines
DRONE_FADE_MS = 3000                        # fade in/out of the drone bed
OUTPUT_BITRATE = "192k"                     # MP3 output bitrate
OUTPUT_DIR = "output"
VERSION = "0.1.0"
