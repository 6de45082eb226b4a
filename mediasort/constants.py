# Decoded with hachoir; everything else goes through Pillow
VIDEO_EXTENSIONS = {
    '.mp4', '.mov', '.m4v', '.avi', '.mkv', '.3gp', '.mts', '.wmv', '.mpg', '.mpeg',
}

# Bytes read per chunk when fingerprinting or copying
CHUNK_SIZE = 64 * 1024

# Attempt 0 is the bare name, attempts 1..98 get a "-n" suffix
PROBE_LIMIT = 99

# EXIF timestamp layout - "YYYY:MM:DD HH:MM:SS"
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
