"""
Telegram Bot Constants

Text templates and messages for the ride bot (pt-BR, HTML parse mode).
"""

# =============================================================================
# Command Descriptions
# =============================================================================

HELP_TEXT = """<b>🚗 Caronas</b>

<b>Oferecer carona</b>
/ida HH:MM [DD/MM] descrição - carona de ida
/volta HH:MM [DD/MM] descrição - carona de volta

<b>Gerenciar</b>
/lotado ida|volta - marca sua carona como lotada
/vagas ida|volta - reabre sua carona
/remover ida|volta - remove sua carona

<b>Consultar</b>
/lista - mostra todas as caronas do grupo

Sem data, a carona é para hoje (ou amanhã, se o horário já passou).
Cada pessoa tem no máximo uma carona de ida e uma de volta."""

BOT_COMMANDS = [
    ("ida", "Oferecer carona de ida"),
    ("volta", "Oferecer carona de volta"),
    ("lista", "Listar caronas"),
    ("lotado", "Marcar carona como lotada"),
    ("vagas", "Reabrir carona"),
    ("remover", "Remover carona"),
    ("ajuda", "Mostrar ajuda"),
]


# =============================================================================
# Usage Messages
# =============================================================================

USAGE_ADD_RIDE = "Uso: /{command} HH:MM [DD/MM] descrição"
USAGE_DIRECTION = "Uso: /{command} ida|volta"


# =============================================================================
# Response Messages
# =============================================================================

MSG_NO_RIDES = "Nenhuma carona marcada. 🚶"
MSG_RIDE_NOT_SAVED = "Não consegui salvar sua carona, tente de novo."
MSG_RIDE_REMOVED = "Carona de {label} removida. 👋"
MSG_RIDE_MARKED_FULL = "Carona de {label} marcada como lotada. 🈵"
MSG_RIDE_REOPENED = "Carona de {label} com vagas novamente. 🆓"
MSG_NO_RIDE = "Você não tem carona de {label} cadastrada."
MSG_STORE_UNAVAILABLE = "⚠️ Banco de dados indisponível no momento. Tente mais tarde."
