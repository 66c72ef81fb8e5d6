"""Constants used in the project."""

import platform
from enum import Enum

__version__ = "0.3.0"


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2


class IndexNames(Enum):
    """Labels of the package repositories the tool knows about.

    Args:
        Enum (string): Repository label printed next to every version.
    """

    WOLFI = "wolfi"
    ENTERPRISE_PACKAGES = "enterprise-packages"
    EXTRA_PACKAGES = "extra-packages"
    LOCAL = "local"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_APK_INDICES = {
        IndexNames.WOLFI.value: "https://packages.wolfi.dev/os/x86_64/APKINDEX.tar.gz",
        IndexNames.ENTERPRISE_PACKAGES.value: "https://apk.cgr.dev/chainguard-private/x86_64/APKINDEX.tar.gz",
        IndexNames.EXTRA_PACKAGES.value: "https://apk.cgr.dev/extra-packages/x86_64/APKINDEX.tar.gz",
    }
    # Sources that never receive the Authorization header.
    PUBLIC_INDICES = [IndexNames.WOLFI.value, IndexNames.LOCAL.value]
    APKINDEX_MEMBER = "APKINDEX"
    HTTP_AUTH_USER = "user"
    ENV_HTTP_AUTH = "HTTP_AUTH"
    TOKEN_HINT_COMMAND = "chainctl auth token --audience apk.cgr.dev"
    ACCEPT_HEADER = "application/gzip"
    USER_AGENT = f"wolfi-package-status/{__version__} ({platform.system().lower()}; {platform.machine()})"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 120  # Timeout in seconds for one index download
    PARENT_INFO_PREFIX = " - Parent/Origin package: "
