"""Constants for suggest routes."""

INVALID_QUERY_TOPICS_DETAIL = "queryTopics must be comma-separated integer ids, got {token!r}"

SUGGEST_DESCRIPTION = (
    "Takes a set of seed topics and suggests articles that relate to them. "
    "Suggestions are weighted by their relatedness to the query and organized "
    "by the categories they belong to. Suggestions that fall under no selected "
    "category are returned in the `uncategorized` bucket."
)
