from typing import Literal


existing_schemes = Literal["s3", "gs"]
