from .compile import JittedCallable, jit_compile

__all__ = ["JittedCallable", "jit_compile"]
