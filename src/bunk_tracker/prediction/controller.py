from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, ok
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container
from ..subjects.model import Subject


def register(app: Flask, container: Container) -> None:
    engine = container.prediction_engine

    def _session_store():
        if container.coordinator is None:
            raise AuthenticationError("No active session")
        return container.coordinator.store

    def _adhoc_subject(raw) -> Subject:
        if not isinstance(raw, dict):
            raise ValidationError("subject must be an object")
        payload = dict(raw)
        payload.setdefault("id", payload.get("_id") or "adhoc")
        return Subject.from_payload(payload)

    def _resolve_subject(body: dict) -> Subject:
        if body.get("subject") is not None:
            return _adhoc_subject(body["subject"])
        if body.get("subjectId"):
            return _session_store().get_subject(str(body["subjectId"]))
        raise ValidationError("subjectId or subject is required")

    @app.route("/api/bunk-predictor/predict", methods=["POST"], endpoint="predict")
    def predict():
        body = request.get_json(silent=True) or {}
        try:
            prediction = engine.predict(_resolve_subject(body))
            return ok({"prediction": prediction.to_dict()})
        except Exception as e:
            return error_response(e)

    @app.route("/api/bunk-predictor/bulk-predict", methods=["POST"], endpoint="bulk_predict")
    def bulk_predict():
        """Predict for the posted subjects, or for every subject of the active session."""
        body = request.get_json(silent=True) or {}
        try:
            raw = body.get("subjects")
            if raw is None:
                subjects = _session_store().snapshot.subjects
            elif isinstance(raw, list):
                subjects = [_adhoc_subject(item) for item in raw]
            else:
                raise ValidationError("subjects must be a list")

            predictions = engine.predict_all(subjects)
            return ok({"predictions": [p.to_dict() for p in predictions]})
        except Exception as e:
            return error_response(e)

    @app.route("/api/bunk-predictor/simulate", methods=["POST"], endpoint="simulate")
    def simulate():
        body = request.get_json(silent=True) or {}
        try:
            result = engine.simulate(_resolve_subject(body), body.get("numberOfBunks", 1))
            return ok({"simulation": result.to_dict()})
        except Exception as e:
            return error_response(e)
