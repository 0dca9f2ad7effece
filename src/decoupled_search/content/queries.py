"""
GraphQL documents for the content source.
"""

ARTICLE_FIELDS = """
    id
    title
    path
    created {
      time
    }
    body {
      processed
    }
    summary {
      value
    }
    category
    tags
    readTime
    image {
      url
      alt
      width
      height
    }
"""

GET_ALL_ARTICLES = f"""
query GetAllArticles($first: Int!) {{
  nodeArticles(first: $first) {{
    nodes {{{ARTICLE_FIELDS}    }}
  }}
}}
"""

GET_ARTICLE_BY_PATH = f"""
query GetArticleBySlug($path: String!) {{
  route(path: $path) {{
    ... on RouteInternal {{
      entity {{
        ... on NodeArticle {{{ARTICLE_FIELDS}        }}
      }}
    }}
  }}
}}
"""

MAX_ARTICLES = 100
