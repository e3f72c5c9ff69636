from tests.fixtures.app_fixtures import *  # noqa: F401,F403
from tests.fixtures.storage_fixtures import *  # noqa: F401,F403
