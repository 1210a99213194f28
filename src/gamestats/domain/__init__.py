"""Pure domain logic: slugs, frontmatter schema, tables, templates."""
