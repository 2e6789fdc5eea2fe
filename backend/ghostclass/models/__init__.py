# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant le démarrage de l'API.

from ghostclass.models.tracker import TrackedEntry  # noqa: F401
from ghostclass.models.user_settings import UserSettings  # noqa: F401
from ghostclass.models.notification import Notification  # noqa: F401
