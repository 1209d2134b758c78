"""
Web application module for the Fair Minutes allocation engine.

This module contains the Flask server exposing the engine as JSON endpoints.
The API is stateless over allocations: callers post the current allocation
with every edit and keep the returned one.
"""
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..models import Allocation, AllocationError, AllocationValidationError, FormationConfig
from ..services import (
    AllocationValidationService, RulesService, assign_slot, evaluate, generate,
    quarter_breakdown, quarter_roles, set_slot_wave, substitutes_for_quarter,
    swap_slots, swap_with_substitute,
)
from ..utils.constants import APP_TITLE, DEFAULT_API_HOST, DEFAULT_API_PORT

logger = logging.getLogger(__name__)


class WebAppState:
    """State holder for the web application; only the rules store lives here."""

    def __init__(self, rules_service: Optional[RulesService] = None):
        self.rules_service = rules_service or RulesService()

    def rules(self) -> FormationConfig:
        return self.rules_service.get_rules()


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise AllocationValidationError("Request body must be a JSON object")
    return data


def _require(data: Dict[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise AllocationValidationError(f"Missing required field: {key}")
    return data[key]


def _require_int(data: Dict[str, Any], key: str) -> int:
    value = _require(data, key)
    if isinstance(value, bool):
        raise AllocationValidationError(f"Field {key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise AllocationValidationError(f"Field {key} must be an integer") from None


def _allocation_from(data: Dict[str, Any]) -> Allocation:
    payload = _require(data, "allocation")
    if not isinstance(payload, dict):
        raise AllocationValidationError("Field allocation must be an object")
    return Allocation.from_dict(payload)


def _allocation_response(allocation: Allocation, config: FormationConfig):
    return jsonify({
        "success": True,
        "allocation": allocation.to_dict(),
        "report": evaluate(allocation, config).to_dict(),
    })


def _failure(error: Exception):
    if isinstance(error, AllocationError):
        return jsonify({"success": False, "error": str(error),
                        "error_type": type(error).__name__}), 400
    logger.exception("Unexpected error handling %s %s", request.method, request.path)
    return jsonify({"success": False, "error": "Internal server error"}), 500


def create_app(rules_service: Optional[RulesService] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        rules_service: Rules store to use; defaults to the override file in
            the working directory

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    state = WebAppState(rules_service)
    app.config["APP_STATE"] = state

    # ==================== Rules ==================== #

    @app.route("/api/rules", methods=["GET"])
    def get_rules():
        """Return the active formation rules."""
        return jsonify({"success": True, "rules": state.rules().to_dict()})

    @app.route("/api/rules", methods=["PUT"])
    def update_rules():
        """Merge a partial override onto the active rules and persist it."""
        try:
            data = _json_body()
            config = FormationConfig.from_dict(data, base=state.rules())
            state.rules_service.persist_rules(config)
            return jsonify({"success": True, "rules": config.to_dict()})
        except Exception as e:
            return _failure(e)

    @app.route("/api/rules", methods=["DELETE"])
    def reset_rules():
        """Drop the override and return the defaults."""
        try:
            state.rules_service.reset_rules()
            return jsonify({"success": True, "rules": state.rules().to_dict()})
        except Exception as e:
            return _failure(e)

    # ==================== Allocation ==================== #

    @app.route("/api/allocations/generate", methods=["POST"])
    def generate_allocation():
        """Generate a lineup for the posted squad."""
        try:
            data = _json_body()
            squad = _require(data, "squad")
            if not isinstance(squad, list):
                raise AllocationValidationError("Field squad must be a list of names")
            manual_goalkeepers = data.get("manual_goalkeepers")
            if manual_goalkeepers is not None and (
                    not isinstance(manual_goalkeepers, list)
                    or any(g is not None and not isinstance(g, str) for g in manual_goalkeepers)):
                raise AllocationValidationError(
                    "Field manual_goalkeepers must be a list of names or nulls"
                )
            config = state.rules()
            allocation = generate(squad, manual_goalkeepers, config)
            return _allocation_response(allocation, config)
        except Exception as e:
            return _failure(e)

    @app.route("/api/allocations/assign", methods=["POST"])
    def assign_allocation_slot():
        """Put a player into a slot."""
        try:
            data = _json_body()
            config = state.rules()
            allocation = assign_slot(
                _allocation_from(data),
                _require_int(data, "quarter"),
                _require_int(data, "slot_index"),
                _require(data, "player"),
                config,
                candidates=data.get("candidates"),
            )
            return _allocation_response(allocation, config)
        except Exception as e:
            return _failure(e)

    @app.route("/api/allocations/swap", methods=["POST"])
    def swap_allocation_slots():
        """Swap two slots of the same quarter."""
        try:
            data = _json_body()
            config = state.rules()
            if "quarter_b" in data and data["quarter_b"] != data.get("quarter"):
                raise AllocationValidationError("Cannot swap slots across quarters")
            allocation = swap_slots(
                _allocation_from(data),
                _require_int(data, "quarter"),
                _require_int(data, "slot_index_a"),
                _require_int(data, "slot_index_b"),
                config,
            )
            return _allocation_response(allocation, config)
        except Exception as e:
            return _failure(e)

    @app.route("/api/allocations/substitute", methods=["POST"])
    def substitute_into_slot():
        """Bring a substitute into a slot."""
        try:
            data = _json_body()
            config = state.rules()
            allocation = swap_with_substitute(
                _allocation_from(data),
                _require_int(data, "quarter"),
                _require_int(data, "slot_index"),
                _require(data, "substitute"),
                config,
                candidates=data.get("candidates"),
            )
            return _allocation_response(allocation, config)
        except Exception as e:
            return _failure(e)

    @app.route("/api/allocations/wave", methods=["POST"])
    def change_slot_wave():
        """Move an outfield slot to another wave."""
        try:
            data = _json_body()
            config = state.rules()
            allocation = set_slot_wave(
                _allocation_from(data),
                _require_int(data, "quarter"),
                _require_int(data, "slot_index"),
                _require(data, "wave"),
                config,
            )
            return _allocation_response(allocation, config)
        except Exception as e:
            return _failure(e)

    @app.route("/api/allocations/evaluate", methods=["POST"])
    def evaluate_allocation():
        """Return fairness statistics for the posted allocation."""
        try:
            data = _json_body()
            report = evaluate(_allocation_from(data), state.rules())
            return jsonify({"success": True, "report": report.to_dict()})
        except Exception as e:
            return _failure(e)

    @app.route("/api/allocations/breakdown", methods=["POST"])
    def player_breakdown():
        """Per-quarter minutes and roles for one player."""
        try:
            data = _json_body()
            config = state.rules()
            allocation = _allocation_from(data)
            player = _require(data, "player")
            squad = data.get("squad")
            return jsonify({
                "success": True,
                "player": player,
                "minutes": quarter_breakdown(allocation, player, squad, config),
                "roles": quarter_roles(allocation, player, config),
            })
        except Exception as e:
            return _failure(e)

    @app.route("/api/allocations/validate", methods=["POST"])
    def validate_allocation():
        """Report structural problems, double-booking and substitutes per quarter."""
        try:
            data = _json_body()
            config = state.rules()
            allocation = _allocation_from(data)
            squad = data.get("squad")
            result = AllocationValidationService(config).validate(allocation, squad)
            response: Dict[str, Any] = {
                "success": True,
                "valid": result.is_valid,
                "errors": result.errors,
            }
            if squad is not None:
                response["substitutes"] = {
                    str(q.quarter): substitutes_for_quarter(allocation, q.quarter, squad)
                    for q in allocation.quarters
                }
            return jsonify(response)
        except Exception as e:
            return _failure(e)

    return app


def run_web_app(host: str = DEFAULT_API_HOST, port: int = DEFAULT_API_PORT,
                rules_service: Optional[RulesService] = None) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        rules_service: Rules store to use
    """
    app = create_app(rules_service)
    logger.info("Starting %s API on %s:%s", APP_TITLE, host, port)
    app.run(host=host, port=port, debug=False)
