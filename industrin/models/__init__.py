from industrin.db.base import Base  # noqa: F401

from . import company         # noqa: F401
from . import admin_user      # noqa: F401
from . import claim_request   # noqa: F401
from . import company_user    # noqa: F401
from . import quote_request   # noqa: F401
