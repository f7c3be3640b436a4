"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CHURCH_NAME = "Chapelle Pleine de Gloire"

MAX_PHOTO_BYTES = 5 * 1024 * 1024
PHOTO_FOLDER = "fideles"
MIN_PASSWORD_LENGTH = 6

UNDEFINED_BUCKET = "Non défini"
ALL_FILTER = "all"

# Listes prédéfinies proposées dans les formulaires (non imposées à l'écriture).
ROLE_TAGS = (
    "Pasteur",
    "Ancien",
    "Diacre",
    "Évangéliste",
    "Chantre",
    "Trésorier",
    "Secrétaire",
    "Membre",
    "Autre",
)

MINISTRIES = (
    "Direction",
    "Accueil",
    "Louange",
    "Intercession",
    "Enseignement",
    "Jeunesse",
    "Enfants",
    "Évangélisation",
    "Administration",
    "Média",
    "Technique",
    "Social",
    "Autre",
)

DEFAULT_SESSION_DAYS = 7
