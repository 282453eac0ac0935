"""
Asset valuation routes
"""

from flask import Blueprint, render_template
from flask_login import login_required

from stockplus.services.inventory.asset_service import AssetService

bp = Blueprint('assets', __name__)


@bp.route('/')
@login_required
def valuation():
    return render_template('assets/valuation.html', valuation=AssetService.get_valuation())
