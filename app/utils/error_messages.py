"""Localized error messages for API responses."""

ERROR_MESSAGES = {
    "player_not_found": {
        "es": "Jugador no encontrado",
        "en": "Player not found",
    },
    "prediction_not_found": {
        "es": "Predicción no encontrada",
        "en": "Prediction not found",
    },
    "same_player": {
        "es": "Por favor selecciona dos jugadores diferentes",
        "en": "Please select two different players",
    },
    "prediction_not_saved": {
        "es": "No se pudo guardar la predicción",
        "en": "The prediction could not be saved",
    },
    "matches_queued": {
        "es": "No hay partidos locales, buscando en segundo plano",
        "en": "No local matches found, fetching in background",
    },
    "unknown_kind": {
        "es": "Tipo de datos desconocido",
        "en": "Unknown data kind",
    },
}


def get_error_message(error_key: str, lang: str = "es") -> str:
    """Get localized error message.

    Args:
        error_key: Key for the error message
        lang: Language code (es, en)

    Returns:
        Localized error message, falls back to English if not found
    """
    if error_key not in ERROR_MESSAGES:
        return error_key

    messages = ERROR_MESSAGES[error_key]
    return messages.get(lang, messages.get("en", error_key))
