"""
Test FastAPI endpoints in backend/query_api.py

Brief tests for core API functionality:
- Health check and graph type listing
- Open / close / graph data round trip
- Reference joint selection
"""
from __future__ import annotations

from fastapi.testclient import TestClient

from analysis.controller import AnalysisGraphController
from backend.query_api import close_analysis_graph
from backend.query_api import create_app
from backend.query_api import get_graph_data
from backend.query_api import get_mechanism
from backend.query_api import get_status
from backend.query_api import get_summary
from backend.query_api import list_graph_types
from backend.query_api import open_analysis_graph
from backend.query_api import OpenGraphRequest
from backend.query_api import ReferenceJointRequest
from backend.query_api import sanitize_for_json
from backend.query_api import select_reference_joint
from pylink_tools.interaction import Selection
from pylink_tools.mechanism import Mechanism
from pylink_tools.solver import KinematicSolver


def test_status_endpoint():
    """Test /status endpoint returns operational status"""
    result = get_status()
    assert result['status'] == 'operational', f'Status check failed: {result}'
    assert 'message' in result, 'Missing message in status response'


def test_list_graph_types():
    """Test /analysis/graph-types lists every graph type with its display name"""
    result = list_graph_types()
    assert result['status'] == 'success'
    assert [t['value'] for t in result['graph_types']] == list(range(6))
    assert result['graph_types'][0]['name'] == 'Center of Mass Position'


def test_open_and_close_com_position(scenario_controller):
    """Test opening and closing the center of mass graph through the endpoints"""
    compound = scenario_controller.get_current_compound_link()

    result = open_analysis_graph(OpenGraphRequest(graph_type=0), scenario_controller)
    assert result['status'] == 'success', f"Open failed: {result.get('message')}"
    assert result['graph_type'] == 'COM_POSITION'
    assert len(result['chart']['xData']) == 24
    assert len(result['chart']['timeLabels']) == 24
    assert len(compound.joints) == 3

    data = get_graph_data(scenario_controller)
    assert data['state'] == 'open'
    assert data['chart']['xData'] == result['chart']['xData']

    closed = close_analysis_graph(scenario_controller)
    assert closed == {'status': 'success', 'state': 'closed'}
    assert len(compound.joints) == 2


def test_open_invalid_graph_type(scenario_controller):
    """Test an unknown graph type is reported, not raised"""
    result = open_analysis_graph(OpenGraphRequest(graph_type='sideways'), scenario_controller)
    assert result['status'] == 'error'
    assert 'Invalid graph type' in result['message']
    assert scenario_controller.state == 'closed'


def test_close_reports_cleanup_error(scenario_controller):
    """Test a failed tracer removal is reported with the graph closed"""
    open_analysis_graph(OpenGraphRequest(graph_type='com_position'), scenario_controller)
    scenario_controller.mechanism.remove_joint(scenario_controller.placeholders.placeholder_id)

    result = close_analysis_graph(scenario_controller)
    assert result['status'] == 'error'
    assert result['state'] == 'closed'


def test_select_reference_joint(scenario_controller):
    """Test only joints of the selected compound link can become the reference"""
    result = select_reference_joint(ReferenceJointRequest(joint_id=6), scenario_controller)
    assert result == {'status': 'success', 'reference_joint': 'B'}

    result = select_reference_joint(ReferenceJointRequest(joint_id=0), scenario_controller)
    assert result['status'] == 'error'
    assert scenario_controller.get_reference_joint().id == 6


def test_summary(scenario_controller):
    """Test the data summary of the selected compound link"""
    result = get_summary(scenario_controller)
    assert result['status'] == 'success'
    assert result['link_name'] == 'coupler_body'
    assert result['center_of_mass'] == [10.0, 20.0]


def test_sanitize_for_json():
    """Test inf and nan are made JSON safe"""
    assert sanitize_for_json({'a': (float('inf'), float('nan'), 1.5)}) == {'a': ['Infinity', None, 1.5]}


def test_routes_through_app(controller):
    """Test the routes registered by create_app"""
    client = TestClient(create_app(controller))

    assert client.get('/status').json()['status'] == 'operational'

    response = client.post('/analysis/open', json={'graph_type': 'REFERENCE_JOINT_POSITION'})
    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 'success'
    assert len(body['chart']['xData']) == 24

    summary = client.get('/analysis/summary').json()
    assert summary['state'] == 'open'
    assert summary['graph_type'] == 'REFERENCE_JOINT_POSITION'

    assert client.get('/analysis/mechanism').json()['placeholder_joint_id'] is None
    assert client.post('/analysis/close').json()['state'] == 'closed'
    assert client.post('/analysis/reference-joint', json={'joint_id': -1}).status_code == 422


def test_open_unsolvable_graph_closes_it(locked_controller):
    """Test a solver failure is reported and leaves no tracer joint behind"""
    before = sorted(locked_controller.mechanism.joints)

    result = open_analysis_graph(OpenGraphRequest(graph_type=0), locked_controller)

    assert result['status'] == 'error'
    assert result['state'] == 'closed'
    assert sorted(locked_controller.mechanism.joints) == before


def test_get_mechanism(scenario_controller):
    """Test /analysis/mechanism lists the tracer joint only while the graph is open"""
    result = get_mechanism(scenario_controller)
    assert result['status'] == 'success'
    assert result['placeholder_joint_id'] is None
    assert [j['id'] for j in result['mechanism']['joints']] == [0, 1, 5, 6]
    assert result['mechanism']['compound_links'][0]['name'] == 'coupler_body'

    open_analysis_graph(OpenGraphRequest(graph_type=0), scenario_controller)
    result = get_mechanism(scenario_controller)
    assert result['placeholder_joint_id'] == 7
    assert [j['id'] for j in result['mechanism']['joints']] == [0, 1, 5, 6, 7]
    coupler = next(link for link in result['mechanism']['links'] if link['name'] == 'coupler')
    assert coupler['joints'] == [5, 6, 7]


def test_summary_of_compound_link_without_joints():
    """Test an empty compound link is reported as an error payload"""
    mechanism = Mechanism()
    link = mechanism.add_link([], name='empty')
    compound = mechanism.add_compound_link([link.id], name='empty_body')
    controller = AnalysisGraphController(mechanism, KinematicSolver(mechanism), Selection(compound))

    result = get_summary(controller)
    assert result['status'] == 'error'
    assert 'no joints' in result['message']


def test_select_reference_joint_without_compound_selection(scenario_controller):
    """Test a non compound selection is reported, not raised"""
    scenario_controller.selection.select(scenario_controller.mechanism.get_joint(5))

    result = select_reference_joint(ReferenceJointRequest(joint_id=5), scenario_controller)
    assert result['status'] == 'error'
    assert 'compound link' in result['message']
