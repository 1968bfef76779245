"""Send GraphQL queries and mutations over HTTP."""
