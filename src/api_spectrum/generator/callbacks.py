"""OpenAPI callback objects: ``{name: {expression: {method: operation}}}``."""

from api_spectrum.analysis.base import CallbackInfo

DEFAULT_CALLBACK_RESPONSES = {"200": {"description": "Callback received successfully"}}


class CallbackGenerator:
    def generate(self, callbacks: list[CallbackInfo]) -> dict | None:
        """Operation-level callbacks; ones with ``ref`` point into ``components.callbacks``."""
        if not callbacks:
            return None
        result = {}
        for callback in callbacks:
            if callback.ref is not None:
                result[callback.name] = {"$ref": f"#/components/callbacks/{callback.ref}"}
                continue
            result[callback.name] = self._path_item(callback)
        return result

    def generate_component_callbacks(self, callbacks: list[CallbackInfo]) -> dict:
        return {callback.name: self._path_item(callback) for callback in callbacks}

    def _path_item(self, callback: CallbackInfo) -> dict:
        return {callback.expression: {callback.method.lower(): self._operation(callback)}}

    @staticmethod
    def _operation(callback: CallbackInfo) -> dict:
        operation: dict = {}
        if callback.summary is not None:
            operation["summary"] = callback.summary
        if callback.description is not None:
            operation["description"] = callback.description
        if callback.request_body:
            operation["requestBody"] = {"content": {"application/json": {"schema": callback.request_body}}}
        operation["responses"] = callback.responses or dict(DEFAULT_CALLBACK_RESPONSES)
        return operation
