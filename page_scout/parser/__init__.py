"""page_scout.parser: разбор sitemap и выделение секции <head>."""
