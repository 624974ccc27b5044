"""
Core application components: DDD building blocks, dependency container,
application factory and lifecycle.
"""
