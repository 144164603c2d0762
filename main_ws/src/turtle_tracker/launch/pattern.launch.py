from launch import LaunchDescription
from launch_ros.actions import Node
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration

def generate_launch_description():
    return LaunchDescription([
        DeclareLaunchArgument('pattern', default_value='circle'),
        Node(
            package='turtlesim',
            executable='turtlesim_node',
            name='turtlesim',
        ),
        Node(
            package='turtle_tracker',
            executable='pattern_publisher',
            name='pattern_publisher',
            parameters=[{'pattern': LaunchConfiguration('pattern')}],
        ),
    ])
