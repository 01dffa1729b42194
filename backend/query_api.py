from __future__ import annotations

import logging
import math
import time

from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from pydantic import Field

from analysis.controller import AnalysisGraphController
from analysis.graph_types import get_graph_type_name
from analysis.graph_types import get_graph_types
from analysis.placeholder import PlaceholderJointError
from configs.appconfig import AppConfig
from pylink_tools.mechanism import JointNotFoundError
from pylink_tools.solver import SolverError
from pylink_tools.solver import TrajectoryNotFoundError

logger = logging.getLogger(__name__)


def sanitize_for_json(obj):
    """
    Recursively sanitize an object for JSON serialization.

    Converts inf/-inf to string "Infinity"/"-Infinity" and nan to null.
    """
    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [sanitize_for_json(item) for item in obj]
    elif isinstance(obj, float):
        if math.isinf(obj):
            return 'Infinity' if obj > 0 else '-Infinity'
        elif math.isnan(obj):
            return None
        return obj
    return obj


class OpenGraphRequest(BaseModel):
    graph_type: int | str = Field(description='GraphType value or member name')


class ReferenceJointRequest(BaseModel):
    joint_id: int = Field(ge=0, description='Id of a joint on the selected compound link')


def get_controller(request: Request) -> AnalysisGraphController:
    return request.app.state.controller


def get_status():
    return {
        'status': 'operational',
        'message': 'Analysis backend is running successfully',
    }


def list_graph_types():
    """Graph types for menu population."""
    return {
        'status': 'success',
        'graph_types': [
            {'value': int(t), 'key': t.name, 'name': get_graph_type_name(t)}
            for t in get_graph_types()
        ],
    }


def get_summary(controller: AnalysisGraphController = Depends(get_controller)):
    """Data summary of the selected compound link."""
    try:
        return {'status': 'success', **sanitize_for_json(controller.summary())}
    except (TypeError, ValueError) as e:
        return {'status': 'error', 'message': str(e)}


def get_mechanism(controller: AnalysisGraphController = Depends(get_controller)):
    """
    Joints, links and compound links of the analysed mechanism.

    While the center of mass graph is open the tracer joint is listed too,
    its id is returned as placeholder_joint_id.
    """
    return {
        'status': 'success',
        'placeholder_joint_id': controller.placeholders.placeholder_id,
        'mechanism': sanitize_for_json(controller.mechanism.to_dict()),
    }


def open_analysis_graph(
    request: OpenGraphRequest,
    controller: AnalysisGraphController = Depends(get_controller),
):
    """
    Open a graph and compute its data.

    Returns:
        {
            "status": "success",
            "graph_type": "COM_POSITION",
            "name": "Center of Mass Position",
            "chart": {"xData": [...], "yData": [...], "timeLabels": [...]},
            "execution_time_ms": 15.2
        }
    """
    try:
        start_time = time.perf_counter()
        series = controller.open_analysis_graph(request.graph_type)
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        graph_type = controller.current_graph_type
        return {
            'status': 'success',
            'graph_type': graph_type.name,
            'name': get_graph_type_name(graph_type),
            'chart': sanitize_for_json(series.to_dict()),
            'execution_time_ms': execution_time_ms,
        }
    except ValueError as e:
        return {'status': 'error', 'message': f'Invalid graph type: {e}'}
    except (PlaceholderJointError, SolverError, TrajectoryNotFoundError, JointNotFoundError, TypeError) as e:
        logger.exception('Failed to open analysis graph')
        return {'status': 'error', 'message': f'Failed to open graph: {e}', 'state': controller.state}


def close_analysis_graph(controller: AnalysisGraphController = Depends(get_controller)):
    """Close the open graph; the graph is closed even when cleanup reports an error."""
    try:
        controller.close_analysis_graph()
        return {'status': 'success', 'state': controller.state}
    except (PlaceholderJointError, JointNotFoundError) as e:
        logger.exception('Placeholder cleanup failed while closing graph')
        return {'status': 'error', 'message': f'Graph closed with cleanup error: {e}', 'state': controller.state}


def get_graph_data(controller: AnalysisGraphController = Depends(get_controller)):
    try:
        series = controller.get_graph_data()
        return {
            'status': 'success',
            'state': controller.state,
            'chart': sanitize_for_json(series.to_dict()),
        }
    except (PlaceholderJointError, SolverError, TrajectoryNotFoundError, JointNotFoundError) as e:
        logger.exception('Failed to compute graph data')
        return {'status': 'error', 'message': str(e)}


def select_reference_joint(
    request: ReferenceJointRequest,
    controller: AnalysisGraphController = Depends(get_controller),
):
    try:
        candidates = {j.id: j for j in controller.get_reference_candidates()}
    except TypeError as e:
        return {'status': 'error', 'message': str(e)}
    joint = candidates.get(request.joint_id)
    if joint is None:
        return {
            'status': 'error',
            'message': f'Joint {request.joint_id} is not on the selected compound link',
        }
    controller.on_reference_joint_selected(joint)
    return {'status': 'success', 'reference_joint': joint.name}


def create_app(controller: AnalysisGraphController) -> FastAPI:
    """Build the API around one controller."""
    app = FastAPI(title='Compound Link Analysis API')
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=['*'],
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    prefix = AppConfig.API_PREFIX
    app.add_api_route('/status', get_status, methods=['GET'])
    app.add_api_route(f'{prefix}/graph-types', list_graph_types, methods=['GET'])
    app.add_api_route(f'{prefix}/summary', get_summary, methods=['GET'])
    app.add_api_route(f'{prefix}/mechanism', get_mechanism, methods=['GET'])
    app.add_api_route(f'{prefix}/open', open_analysis_graph, methods=['POST'])
    app.add_api_route(f'{prefix}/close', close_analysis_graph, methods=['POST'])
    app.add_api_route(f'{prefix}/graph-data', get_graph_data, methods=['GET'])
    app.add_api_route(f'{prefix}/reference-joint', select_reference_joint, methods=['POST'])
    return app
