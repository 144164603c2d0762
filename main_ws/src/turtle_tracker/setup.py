from setuptools import find_packages, setup
import os
from glob import glob

package_name = 'turtle_tracker'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.py')),
    ],
    install_requires=['setuptools', 'numpy'],
    zip_safe=True,
    maintainer='david-ross',
    maintainer_email='ross.d2@northeastern.edu',
    description='Goal tracking action server and motion pattern publisher for turtlesim',
    license='Apache-2.0',
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'tracking_server = turtle_tracker.nodes.tracking_server:main',
            'pattern_publisher = turtle_tracker.nodes.pattern_publisher:main',
            'tracking_client = turtle_tracker.tools.tracking_client:main',
        ],
    },
)
