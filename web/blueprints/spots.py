"""
Spots Blueprint.

Handles all catalog routes:
- GET / - Ranked spot listing
- GET /search - Listing filtered by ?q=
- POST /add - Create a spot
- POST /recommend/<id> - Add one recommendation
- POST /update/<id> - Partial update (404 when the spot does not exist)
- POST /delete/<id> - Delete a spot
- POST /batchdelete - Delete every spot in the `ids` form list

Write routes always redirect back to the listing; only /update reports
a missing spot.
"""

from flask import Blueprint, make_response, redirect, render_template, request, url_for

from logging_config import get_logger
from web.services import spot_service
from core.spot_catalog import Outcome, StorageFailure

logger = get_logger(__name__)

spots_bp = Blueprint("spots", __name__, template_folder="../templates")

# Injected by init_spots()
spots_bp.catalog = None


def _back_to_listing():
    return redirect(url_for("spots.index"))


@spots_bp.errorhandler(StorageFailure)
def storage_failure(error):
    logger.error(f"Storage failure on {request.method} {request.path}: {error}")
    response = make_response("Spot storage is unavailable", 500)
    response.mimetype = "text/plain"
    return response


@spots_bp.route("/", methods=["GET"])
def index():
    """Listing of all spots, most recommended first."""
    spots = spot_service.list_spots(spots_bp.catalog)
    return render_template("index.html", spots=spots, query="")


@spots_bp.route("/search", methods=["GET"])
def search():
    query = request.args.get("q", "")
    spots = spot_service.search_spots(spots_bp.catalog, query)
    return render_template("index.html", spots=spots, query=query)


@spots_bp.route("/add", methods=["POST"])
def add():
    spot_fields = spot_service.fields_from_form(request.form)
    spot_service.create_spot(spots_bp.catalog, spot_fields)
    return _back_to_listing()


@spots_bp.route("/recommend/<spot_id>", methods=["POST"])
def recommend(spot_id):
    """Best effort: unknown ids are ignored and the user lands on the listing."""
    parsed_id = spot_service.parse_spot_id(spot_id)
    if parsed_id is not None:
        spot_service.recommend_spot(spots_bp.catalog, parsed_id)
    return _back_to_listing()


@spots_bp.route("/update/<spot_id>", methods=["POST"])
def update(spot_id):
    parsed_id = spot_service.parse_spot_id(spot_id)
    outcome = Outcome.NOT_FOUND
    if parsed_id is not None:
        patch = spot_service.patch_from_form(request.form)
        outcome = spot_service.update_spot(spots_bp.catalog, parsed_id, patch)

    if outcome is Outcome.NOT_FOUND:
        logger.warning(f"Update for unknown spot {spot_id!r}")
        response = make_response(f"No spot found with ID {spot_id}", 404)
        response.mimetype = "text/plain"
        return response
    return _back_to_listing()


@spots_bp.route("/delete/<spot_id>", methods=["POST"])
def delete(spot_id):
    parsed_id = spot_service.parse_spot_id(spot_id)
    if parsed_id is not None:
        spot_service.delete_spot(spots_bp.catalog, parsed_id)
    return _back_to_listing()


@spots_bp.route("/batchdelete", methods=["POST"])
def batch_delete():
    """Deletes the checked spots. Form: ids=1&ids=2..."""
    spot_ids = spot_service.parse_spot_ids(request.form.getlist("ids"))
    if spot_ids:
        spot_service.batch_delete_spots(spots_bp.catalog, spot_ids)
    return _back_to_listing()


def init_spots(app, catalog):
    """
    Initialize the spots blueprint and register it with the app.

    Args:
        app: Flask application instance
        catalog: SpotCatalog instance used by every route
    """
    # Store catalog reference on blueprint for route access
    spots_bp.catalog = catalog

    app.register_blueprint(spots_bp)

    logger.info(f"Spots blueprint registered ({catalog!r})")
