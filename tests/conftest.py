import os
import tempfile

# Keep the attempt log out of the source tree while testing; config reads the
# environment once, at import.
os.environ.setdefault(
    "BP_LOG_FILE", os.path.join(tempfile.gettempdir(), "block_packer_test_attempts.log")
)
