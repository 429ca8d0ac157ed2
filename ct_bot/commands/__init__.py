"""Commands module — FLN operations and special activities.

Sub-modules:
    common: Shared CommandError exception and payment helper.
    terror: Terror operation — §3.3.4
    attack: Attack operation and Ambush — §3.3.3, §4.3.3
    rally: Rally operation and Agitation — §3.3.1
    march: March operation — §3.3.2
    sa_extort: Extort SA — §4.3.2
    sa_subvert: Subvert SA — §4.3.1

Reference: §3.3.1-§3.3.4, §4.3.1-§4.3.3
"""

from ct_bot.commands.common import (  # noqa: F401
    CommandError,
    pay_fln,
)

from ct_bot.commands.terror import (  # noqa: F401
    terror_in_space,
    validate_terror_space,
)

from ct_bot.commands.attack import (  # noqa: F401
    attack_in_space,
    attack_losses,
    validate_attack_space,
)

from ct_bot.commands.rally import (  # noqa: F401
    rally_in_space,
    rally_france_track,
    agitate_in_space,
    agitate_cost,
)

from ct_bot.commands.march import (  # noqa: F401
    march_group,
    march_cost,
    validate_march,
)

from ct_bot.commands.sa_extort import extort_in_space  # noqa: F401
from ct_bot.commands.sa_subvert import subvert_in_space  # noqa: F401
