"""Bundled image providers.

Importing this package registers every bundled provider with
:data:`~lunasdk.core.image_models.provider_registry`:

- ``"replicate"``: text-to-image through Replicate predictions
- ``"stable-diffusion"``: image-to-image and text-to-image through a
  Stability-style REST API

The subpackages are imported by module path (``lunasdk.providers.replicate``)
rather than re-exported here, so the default provider instances named
``replicate`` and ``stable_diffusion`` never shadow them.
"""

from lunasdk.core.image_models import provider_registry
from lunasdk.providers.replicate.provider import create_replicate
from lunasdk.providers.stable_diffusion.provider import create_stable_diffusion

provider_registry.register("replicate", create_replicate)
provider_registry.register("stable-diffusion", create_stable_diffusion)
