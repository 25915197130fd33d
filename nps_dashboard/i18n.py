"""
UI strings for every supported language.
Keys are shared across languages; translate() falls back to the default
language, then to the key itself, so a missing string never breaks the page.
"""

from nps_dashboard.config import DEFAULT_LANGUAGE

TRANSLATIONS = {
    "es": {
        "appTitle": "Panel de Feedback de Clientes",
        "appSubtitle": "NPS, CSAT y análisis con IA de las respuestas de la encuesta",
        "language": "Idioma",
        "dataSourceTitle": "Fuente de datos",
        "dataSourceSubtitle": "Las respuestas se leen directamente de la hoja de cálculo de la encuesta.",
        "filterByDateTitle": "Filtrar por fecha",
        "startDate": "Fecha de inicio",
        "endDate": "Fecha de fin",
        "analyze": "Analizar",
        "refresh": "Actualizar",
        "analyzing": "Analizando...",
        "loading": "Cargando y analizando el feedback...",
        "metricsTitle": "Métricas clave",
        "npsTitle": "Net Promoter Score",
        "npsDescription": "Promotores (9-10) menos detractores (0-6), sobre el total de respuestas.",
        "promoters": "Promotores",
        "passives": "Pasivos",
        "detractors": "Detractores",
        "respondents": "Respuestas",
        "csatTitle": "Satisfacción (CSAT)",
        "csatDescription": "Porcentaje de respuestas con 4 o 5 en cada categoría.",
        "csatService": "Atención",
        "csatDelivery": "Entrega",
        "csatPlatform": "Plataforma",
        "sentimentTitle": "Análisis de sentimiento",
        "sentimentDescription": "Clasificación de los comentarios abiertos.",
        "positive": "Positivo",
        "neutral": "Neutral",
        "negative": "Negativo",
        "suggestionsTitle": "Sugerencias de mejora",
        "suggestionsDescription": "Acciones concretas basadas en lo que dicen los clientes.",
        "originalCommentLabel": "Comentario original",
        "noSuggestions": "No hay comentarios de mejora en este período.",
        "whatWeDidWellTitle": "Lo que hicimos bien",
        "whatWeDidWellDescription": "Los comentarios de promotores que mejor muestran nuestras fortalezas.",
        "rawDataTitle": "Respuestas del período",
        "errorTitle": "Error:",
        "errorDateRange": "La fecha de inicio no puede ser posterior a la fecha de fin.",
        "errorNoData": "No se encontraron datos para el rango de fechas seleccionado.",
        "errorSource": "No se pudo leer la hoja de cálculo. Verifica la URL y los permisos de acceso.",
        "errorGeneration": "No se pudo completar el análisis con IA. Inténtalo de nuevo.",
        "errorSuggestions": "No se pudieron actualizar las sugerencias",
        "errorUnknown": "Ocurrió un error inesperado.",
    },
    "pt": {
        "appTitle": "Painel de Feedback de Clientes",
        "appSubtitle": "NPS, CSAT e análise com IA das respostas da pesquisa",
        "language": "Idioma",
        "dataSourceTitle": "Fonte de dados",
        "dataSourceSubtitle": "As respostas são lidas diretamente da planilha da pesquisa.",
        "filterByDateTitle": "Filtrar por data",
        "startDate": "Data de início",
        "endDate": "Data de fim",
        "analyze": "Analisar",
        "refresh": "Atualizar",
        "analyzing": "Analisando...",
        "loading": "Carregando e analisando o feedback...",
        "metricsTitle": "Métricas principais",
        "npsTitle": "Net Promoter Score",
        "npsDescription": "Promotores (9-10) menos detratores (0-6), sobre o total de respostas.",
        "promoters": "Promotores",
        "passives": "Neutros",
        "detractors": "Detratores",
        "respondents": "Respostas",
        "csatTitle": "Satisfação (CSAT)",
        "csatDescription": "Porcentagem de respostas com 4 ou 5 em cada categoria.",
        "csatService": "Atendimento",
        "csatDelivery": "Entrega",
        "csatPlatform": "Plataforma",
        "sentimentTitle": "Análise de sentimento",
        "sentimentDescription": "Classificação dos comentários abertos.",
        "positive": "Positivo",
        "neutral": "Neutro",
        "negative": "Negativo",
        "suggestionsTitle": "Sugestões de melhoria",
        "suggestionsDescription": "Ações concretas baseadas no que os clientes dizem.",
        "originalCommentLabel": "Comentário original",
        "noSuggestions": "Não há comentários de melhoria neste período.",
        "whatWeDidWellTitle": "O que fizemos bem",
        "whatWeDidWellDescription": "Os comentários de promotores que melhor mostram nossos pontos fortes.",
        "rawDataTitle": "Respostas do período",
        "errorTitle": "Erro:",
        "errorDateRange": "A data de início não pode ser posterior à data de fim.",
        "errorNoData": "Nenhum dado encontrado para o intervalo de datas selecionado.",
        "errorSource": "Não foi possível ler a planilha. Verifique a URL e as permissões de acesso.",
        "errorGeneration": "Não foi possível concluir a análise com IA. Tente novamente.",
        "errorSuggestions": "Não foi possível atualizar as sugestões",
        "errorUnknown": "Ocorreu um erro inesperado.",
    },
}


def translate(language: str, key: str) -> str:
    table = TRANSLATIONS.get(language) or TRANSLATIONS[DEFAULT_LANGUAGE]
    if key in table:
        return table[key]
    return TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)
